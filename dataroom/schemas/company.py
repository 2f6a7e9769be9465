from pydantic import BaseModel
from typing import Optional, List, Union


class ExecutiveSummary(BaseModel):
    title: str
    tagline: Optional[str] = None
    description: Optional[str] = None
    highlights: List[str] = []


class KeyMetric(BaseModel):
    label: str
    value: Union[str, float, int]
    change: Optional[str] = None
    trend: Optional[str] = None  # up, down, neutral


class Milestone(BaseModel):
    id: str
    date: str
    title: str
    description: Optional[str] = None


class Testimonial(BaseModel):
    id: str
    author: str
    role: Optional[str] = None
    company: Optional[str] = None
    content: str
    featured: bool = False


class Award(BaseModel):
    id: str
    title: str
    organization: Optional[str] = None
    year: Optional[Union[str, int]] = None
    description: Optional[str] = None


class MediaCoverage(BaseModel):
    id: str
    title: str
    publication: str
    date: Optional[str] = None
    url: Optional[str] = None
    excerpt: Optional[str] = None
