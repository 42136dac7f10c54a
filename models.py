from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Bump when the JSON shape of a question changes.
SCHEMA_VERSION = 1


class QuestionRecord(BaseModel):
    """One extracted question. Built at flush time and never modified afterwards."""

    model_config = ConfigDict(frozen=True)

    number: Optional[int] = None
    stem: str = ""
    options: Dict[str, str] = Field(default_factory=dict)
    key: Optional[str] = None
    hint: Optional[str] = None
    # filename -> raw bytes; written to the package, listed by name in JSON
    images: Dict[str, bytes] = Field(default_factory=dict, exclude=True)

    @property
    def image_files(self) -> List[str]:
        return list(self.images.keys())

    @property
    def has_math(self) -> bool:
        fields = [self.stem, self.hint or ""] + list(self.options.values())
        return any("<math" in f for f in fields)

    def to_json_dict(self) -> Dict:
        data = self.model_dump()
        data["images"] = self.image_files
        return data
