import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from app.core.exceptions import RubricLoadException
from app.models.rubric import PillarWeights, Rubric

logger = logging.getLogger(__name__)

DEFAULT_RUBRIC_NAME = "writing_default"

# used when the rubric file itself has no default entry
FALLBACK_RUBRIC = Rubric(
    name=DEFAULT_RUBRIC_NAME,
    weights=PillarWeights(content=30, organization=20, lexis=15, grammar=20, mechanics=15),
)


class RubricLoader:
    """Load named rubric weight maps from a JSON file.

    File format: ``{"<name>": {"weights": {"content": .., "organization": ..,
    "lexis": .., "grammar": .., "mechanics": ..}}, ...}``
    """

    def __init__(self, rubric_file: Optional[str] = None, default_name: str = DEFAULT_RUBRIC_NAME) -> None:
        """
        - If `rubric_file` is None, use `app/rubrics/cefr_rubric.json`.
        - A relative path that does not exist from the CWD is also tried
          relative to the `app` package.
        """
        package_root = Path(__file__).resolve().parents[1]

        if not rubric_file:
            self.rubric_file: Path = package_root / "rubrics" / "cefr_rubric.json"
        else:
            candidate = Path(rubric_file)
            self.rubric_file = candidate if candidate.exists() else (package_root / candidate)

        self.default_name = default_name
        self._rubrics: Dict[str, Rubric] = {}
        self._load_rubrics()

    def _load_rubrics(self) -> None:
        if not self.rubric_file.exists():
            raise RubricLoadException(
                f"Rubric file not found: {self.rubric_file}",
                details={"path": str(self.rubric_file)},
            )

        try:
            with open(self.rubric_file, "r", encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, json.JSONDecodeError) as exc:
            raise RubricLoadException(
                f"Error reading rubrics from {self.rubric_file}: {exc}",
                details={"path": str(self.rubric_file)},
            ) from exc

        if not isinstance(data, dict):
            raise RubricLoadException(f"Rubric file must hold an object: {self.rubric_file}")

        for name, entry in data.items():
            try:
                self._rubrics[name] = Rubric(name=name, weights=PillarWeights(**entry["weights"]))
            except (KeyError, TypeError, ValidationError) as exc:
                raise RubricLoadException(
                    f"Invalid rubric '{name}' in {self.rubric_file}: {exc}",
                    details={"rubric": name},
                ) from exc

        logger.info(f"Loaded {len(self._rubrics)} rubrics from {self.rubric_file}")

    def get(self, name: Optional[str] = None) -> Rubric:
        """Rubric by name; unknown names fall back to the default rubric."""
        name = name or self.default_name
        if name in self._rubrics:
            return self._rubrics[name]

        logger.warning(f"Unknown rubric '{name}', falling back to '{self.default_name}'")
        return self._rubrics.get(self.default_name, FALLBACK_RUBRIC)

    def get_available_rubrics(self) -> List[str]:
        return list(self._rubrics.keys())

    def reload(self) -> None:
        self._rubrics.clear()
        self._load_rubrics()
