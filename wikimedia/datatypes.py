# wikimedia/datatypes.py
from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import Annotated, Any, Mapping, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)

from wikimedia.errors import DecodeError


def _no_text_or_bool(value: Any) -> Any:
    # "12" and true are not numbers in an api.php payload; 12.0 still is
    if isinstance(value, (str, bool)):
        raise ValueError(f"expected an integer, got {type(value).__name__}")
    return value


ApiInt = Annotated[int, BeforeValidator(_no_text_or_bool)]


def _describe(exc: ValidationError) -> str:
    """
    One line per error, located by JSON key path, e.g. "query.pages.1.pageid: ...".
    """
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "response"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class _ApiModel(BaseModel):
    """
    Read-only projection of an api.php object: unknown keys are ignored,
    null or absent keys keep the field's zero value.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @classmethod
    def from_dict(cls, data: Any):
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise DecodeError(_describe(exc)) from exc


class ImageRef(_ApiModel):
    """
    Pointer to a page image (thumbnail or original).
    """

    source: str = ""


class Page(_ApiModel):
    """
    A single page from query.pages.
    Missing pages come back with page_id == 0 and a negative mapping key.
    """

    page_id: ApiInt = Field(default=0, alias="pageid")
    ns: ApiInt = 0
    title: str = ""
    extract: str = ""
    thumbnail: ImageRef = Field(default_factory=ImageRef)
    original: ImageRef = Field(default_factory=ImageRef)


class SearchHit(_ApiModel):
    """
    A single full-text search result (list=search).
    """

    ns: ApiInt = 0
    title: str = ""
    snippet: str = ""  # HTML, matches wrapped in <span class="searchmatch">
    size: ApiInt = 0  # bytes
    word_count: ApiInt = Field(default=0, alias="wordcount")
    timestamp: Optional[datetime] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _empty_timestamp(cls, value: Any) -> Any:
        return value if value != "" else None


class SearchInfo(_ApiModel):
    total_hits: ApiInt = Field(default=0, alias="totalhits")


class Query(_ApiModel):
    """
    The "query" object of an action=query response.
    """

    pages: Mapping[str, Page] = Field(default_factory=dict, validate_default=True)
    search: tuple[SearchHit, ...] = ()
    search_info: SearchInfo = Field(default_factory=SearchInfo, alias="searchinfo")

    @field_validator("pages", mode="after")
    @classmethod
    def _freeze_pages(cls, value: Mapping[str, Page]) -> Mapping[str, Page]:
        return MappingProxyType(dict(value))

    @field_serializer("pages")
    def _dump_pages(self, pages: Mapping[str, Page]) -> dict[str, Page]:
        return dict(pages)

    def first_page(self) -> Optional[Page]:
        """
        First page in response order, or None when no pages were returned.
        """
        return next(iter(self.pages.values()), None)


class SearchContinue(_ApiModel):
    sr_offset: ApiInt = Field(default=0, alias="sroffset")


class QueryContinue(_ApiModel):
    """
    Legacy continuation block ("query-continue"), keyed by module name.
    """

    search: SearchContinue = Field(default_factory=SearchContinue)


class Continue(_ApiModel):
    """
    Current-style continuation block ("continue"), flat parameters to merge
    into the next request.
    """

    sr_offset: ApiInt = Field(default=0, alias="sroffset")
    token: str = Field(default="", alias="continue")  # e.g. "-||"


class ApiResponse(_ApiModel):
    """
    Decoded api.php payload. Fields absent from the JSON keep their zero value.
    """

    query: Query = Field(default_factory=Query)
    query_continue: QueryContinue = Field(
        default_factory=QueryContinue, alias="query-continue"
    )
    continue_: Continue = Field(default_factory=Continue, alias="continue")

    @classmethod
    def from_json(cls, body: bytes | str) -> ApiResponse:
        try:
            return cls.model_validate_json(body)
        except ValidationError as exc:
            raise DecodeError(_describe(exc)) from exc
        except (ValueError, RecursionError) as exc:
            raise DecodeError(f"response is not valid JSON: {exc}") from exc

    @property
    def next_offset(self) -> int:
        """
        Search offset to resume from, 0 when the API reported no more results.
        """
        return self.query_continue.search.sr_offset or self.continue_.sr_offset

    @property
    def has_more(self) -> bool:
        return self.next_offset > 0

    def to_dict(self) -> dict[str, Any]:
        """
        Plain dict projection, JSON-serialisable (timestamps as ISO strings).
        """
        return self.model_dump(mode="json")
