from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from config import Settings


@dataclass(frozen=True)
class ModelRoutingTable:
    """Explicit model routing table.

    Lookups are tried in order: fast mode, browsing, language, content-type
    default, global default. The first configured model wins.
    """
    default_model: str
    fast_model: Optional[str] = None
    browsing_model: Optional[str] = None
    language_models: Dict[str, str] = field(default_factory=dict)
    content_type_models: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ModelRoutingTable":
        return cls(
            default_model=settings.default_model,
            fast_model=settings.fast_model or None,
            browsing_model=settings.browsing_model or None,
            language_models={k.lower(): v for k, v in settings.language_models.items()},
            content_type_models={k.lower(): v for k, v in settings.content_type_models.items()},
        )

    def candidates(
        self,
        content_type: str,
        browsing: bool = False,
        language: Optional[str] = None,
        fast_mode: bool = False,
    ) -> List[Tuple[str, Optional[str]]]:
        return [
            ("fast_mode", self.fast_model if fast_mode else None),
            ("browsing", self.browsing_model if browsing else None),
            ("language", self.language_models.get((language or "").lower())),
            ("content_type", self.content_type_models.get((content_type or "").lower())),
            ("default", self.default_model),
        ]

    def route(
        self,
        content_type: str,
        browsing: bool = False,
        language: Optional[str] = None,
        fast_mode: bool = False,
    ) -> Tuple[str, str]:
        """Return the chosen model and the name of the lookup that matched."""
        for source, model in self.candidates(content_type, browsing, language, fast_mode):
            if model:
                return model, source
        return self.default_model, "default"

    def resolve(self, content_type: str, browsing: bool = False, language: Optional[str] = None, fast_mode: bool = False) -> str:
        return self.route(content_type, browsing, language, fast_mode)[0]
