from typing import Any, Dict, List

from dataroom.console.base import ListScreen

MIN_ANSWER_LENGTH = 5
QA_FILTERS = ("all", "pending", "answered")


class QAScreen(ListScreen):
    filter = "all"

    async def fetch(self) -> List[Dict[str, Any]]:
        return await self.client.get_qa_threads()

    def set_filter(self, value: str) -> None:
        if value not in QA_FILTERS:
            raise ValueError(f"Unknown Q&A filter: {value}")
        self.filter = value

    @property
    def visible(self) -> List[Dict[str, Any]]:
        if self.filter == "all":
            return list(self.items)
        return [t for t in self.items if t.get("status") == self.filter]

    @property
    def counts(self) -> Dict[str, int]:
        pending = sum(1 for t in self.items if t.get("status") == "pending")
        answered = sum(1 for t in self.items if t.get("status") == "answered")
        return {"all": len(self.items), "pending": pending, "answered": answered}

    async def answer(self, thread_id: str, answer_text: str, is_public: bool = True) -> bool:
        answer_text = (answer_text or "").strip()
        if len(answer_text) < MIN_ANSWER_LENGTH:
            return self.reject(f"Answer must be at least {MIN_ANSWER_LENGTH} characters")
        return await self.mutate(
            lambda: self.client.answer_question(thread_id, answer_text, is_public=is_public),
            "Answer posted",
        )
