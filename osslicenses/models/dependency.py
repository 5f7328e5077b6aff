from enum import Enum
from pathlib import Path

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import TypeAdapter


class DependencyKind(str, Enum):
    ORDINARY = 'ordinary'
    UMBRELLA_PRIMARY = 'umbrella-primary'
    UMBRELLA_LICENSE_CARRIER = 'umbrella-license-carrier'

    def __str__(self) -> str:
        return self.value


class Dependency(BaseModel):
    """A resolved library as produced by the dependency resolution step."""
    group: str
    name: str
    version: str
    artifact_path: Path = Field(
        validation_alias=AliasChoices(
            'fileLocation', 'artifactPath', 'artifact_path',
        ),
    )

    model_config = ConfigDict(extra='ignore', frozen=True)

    @property
    def coordinates(self) -> str:
        return f"{self.group}:{self.name}:{self.version}"

    @property
    def license_key(self) -> str:
        return f"{self.group}:{self.name}"


DependencyList = TypeAdapter(list[Dependency])


def load_dependencies(filepath: str | Path) -> list[Dependency]:
    """Loads the JSON dependency list. Raises pydantic.ValidationError on bad records."""
    path = Path(filepath)
    return DependencyList.validate_json(path.read_bytes())
