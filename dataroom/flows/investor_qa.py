from typing import Any, Dict, List, Optional

from dataroom.client.api_client import APIClient
from dataroom.client.errors import APIClientError

MIN_QUESTION_LENGTH = 10
MIN_SEARCH_LENGTH = 3


class InvestorQAFlow:
    """Ask questions and browse answered threads"""

    def __init__(self, client: APIClient):
        self.client = client
        self.threads: List[Dict[str, Any]] = []
        self.results: List[Dict[str, Any]] = []
        self.error: Optional[str] = None

    async def load(self) -> List[Dict[str, Any]]:
        try:
            self.threads = await self.client.get_qa_threads()
            self.error = None
        except APIClientError as e:
            self.error = e.message
        return self.threads

    async def ask(self, question_text: str, category: str = "General", is_urgent: bool = False) -> bool:
        question_text = question_text.strip()
        if len(question_text) < MIN_QUESTION_LENGTH:
            self.error = f"Question must be at least {MIN_QUESTION_LENGTH} characters."
            return False

        try:
            await self.client.submit_question(question_text, category=category, is_urgent=is_urgent)
        except APIClientError as e:
            self.error = e.message
            return False

        await self.load()
        return True

    async def search(self, query: str) -> List[Dict[str, Any]]:
        query = query.strip()
        if len(query) < MIN_SEARCH_LENGTH:
            self.error = f"Search query must be at least {MIN_SEARCH_LENGTH} characters."
            self.results = []
            return self.results

        try:
            self.results = await self.client.search_qa(query)
            self.error = None
        except APIClientError as e:
            self.error = e.message
            self.results = []
        return self.results
