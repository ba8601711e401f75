"""
Interactive answer collection

Asks the surveyor one question per field. A cancel on any question abandons
the whole building; an empty reply only skips that field.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from loguru import logger

from .surfaces import InputSurface

Answer = Dict[str, str]


@dataclass(frozen=True)
class FieldPrompt:
    key: str
    prompt: str


DEFAULT_FIELDS = (
    FieldPrompt("number", "Номер дома"),
    FieldPrompt("street", "Улица"),
    FieldPrompt("levels", "Количество этажей"),
    FieldPrompt("comment", "Комментарий"),
)


class AnswerCollector:
    """Runs the question sequence against an input surface"""
    
    def __init__(self, input_surface: InputSurface):
        self.input_surface = input_surface
    
    def collect(self, fields: Sequence[FieldPrompt] = DEFAULT_FIELDS) -> Optional[Answer]:
        """
        Ask every field in order
        
        Args:
            fields: Ordered (key, prompt) pairs
            
        Returns:
            Answer with non-empty stripped values in field order, or None if
            the surveyor cancelled any question
        """
        answer: Answer = {}
        for field in fields:
            reply = self.input_surface.ask(f"{field.prompt} = ?")
            if reply is None:
                logger.info(f"Input cancelled at '{field.key}', discarding {len(answer)} answered field(s)")
                return None
            value = reply.strip()
            if value:
                answer[field.key] = value
        return answer
