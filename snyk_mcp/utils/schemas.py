from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import InvalidArgumentsError, UnknownToolError


ORG_DESCRIPTION = "Snyk organisation ID (optional if configured in settings or available via Snyk CLI)"

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise ValueError("must be a well-formed URL") from None
    return value


class ToolArgs(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ScanRepositoryArgs(ToolArgs):
    url: Annotated[str, AfterValidator(_check_url)] = Field(
        description="GitHub repository URL (e.g., https://github.com/owner/repo)",
        json_schema_extra={"format": "uri"},
    )
    branch: Optional[str] = Field(default=None, description="Branch to scan (optional)")
    org: Optional[str] = Field(default=None, description=ORG_DESCRIPTION)


class ScanProjectArgs(ToolArgs):
    project_id: str = Field(alias="projectId", description="Snyk project ID to scan")
    org: Optional[str] = Field(default=None, description=ORG_DESCRIPTION)


class ListProjectsArgs(ToolArgs):
    org: Optional[str] = Field(default=None, description=ORG_DESCRIPTION)


class VerifyTokenArgs(ToolArgs):
    pass


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    args_model: Type[ToolArgs]
    input_schema: Dict[str, Any] = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "input_schema", self.args_model.model_json_schema(by_alias=True))


TOOLS: Tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="scan_repository",
        description=(
            "Scan a GitHub repository for security vulnerabilities using Snyk. "
            "Requires the repository's URL (e.g., https://github.com/owner/repo). "
            "Do not use local file paths."
        ),
        args_model=ScanRepositoryArgs,
    ),
    ToolDescriptor(
        name="scan_project",
        description="Scan an existing Snyk project",
        args_model=ScanProjectArgs,
    ),
    ToolDescriptor(
        name="list_projects",
        description="List all projects in a Snyk organisation",
        args_model=ListProjectsArgs,
    ),
    ToolDescriptor(
        name="verify_token",
        description="Verify that the configured Snyk token is valid",
        args_model=VerifyTokenArgs,
    ),
)

_TOOLS_BY_NAME: Dict[str, ToolDescriptor] = {t.name: t for t in TOOLS}


def describe_tools() -> List[ToolDescriptor]:
    return list(TOOLS)


def get_descriptor(name: str) -> ToolDescriptor:
    try:
        return _TOOLS_BY_NAME[name]
    except KeyError:
        raise UnknownToolError(name) from None


def _field_errors(exc: ValidationError) -> List[Tuple[str, str]]:
    errors: List[Tuple[str, str]] = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        errors.append((loc or "arguments", err.get("msg", "invalid value")))
    return errors


def validate_arguments(name: str, arguments: Optional[Mapping[str, Any]]) -> ToolArgs:
    """Validate raw tool-call arguments against the tool's model.

    Raises UnknownToolError for unregistered names and InvalidArgumentsError
    listing every offending field otherwise.
    """
    descriptor = get_descriptor(name)
    try:
        return descriptor.args_model.model_validate(arguments if arguments is not None else {})
    except ValidationError as exc:
        raise InvalidArgumentsError(_field_errors(exc)) from exc
