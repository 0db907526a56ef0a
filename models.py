from __future__ import annotations

from typing import Any, Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

# (matched token text, base token name, interpolation options) -> replacement
CustomInterpolate = Callable[[str, str, Mapping[str, Any]], str]


class ResourceDescriptor(BaseModel):
    """The resource a name is interpolated for."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(default="", description="Absolute resource path, or empty when unknown")
    custom_interpolate: CustomInterpolate | None = Field(
        default=None,
        description="Fallback resolver for tokens with no built-in meaning.",
    )


class HashSpec(BaseModel):
    """Digest settings parsed out of a hash token's arguments."""

    model_config = ConfigDict(frozen=True)

    algorithm: str = Field(default="md5", min_length=1, description="hashlib algorithm name")
    encoding: str = Field(default="hex", min_length=1, description="Encoding name or literal alphabet")
    length: int | None = Field(default=None, ge=1, description="Keep only this many leading characters")


class RequestSegment(BaseModel):
    """One loader (or the resource) in a `!`-delimited request chain."""

    model_config = ConfigDict(frozen=True)

    path_part: str = Field(default="", description="Request path before the first '?'")
    query_part: str = Field(default="", description="Query suffix starting at the first '?', kept verbatim")

    @model_validator(mode="after")
    def _validate_query_part(self) -> "RequestSegment":
        """Query suffixes always start with '?' and paths never contain one."""
        if self.query_part and not self.query_part.startswith("?"):
            raise ValueError("query_part must be empty or start with '?'")
        if "?" in self.path_part:
            raise ValueError("path_part must not contain '?'")
        return self

    def render(self, path_part: str | None = None) -> str:
        """Return the segment text, optionally with a rewritten path part."""
        return (self.path_part if path_part is None else path_part) + self.query_part


class LoaderEntry(BaseModel):
    request: str = Field(..., description="Full loader request including its query")


class LoaderContext(BaseModel):
    """The subset of a build tool's loader context these helpers read."""

    resource_path: str = Field(default="", description="Absolute path of the resource being loaded")
    resource: str = Field(default="", description="Resource request including its query")
    context: str | None = Field(default=None, description="Directory of the resource")
    query: str | dict[str, Any] = Field(default="", description="Loader query string or options object")
    options: dict[str, Any] = Field(default_factory=dict, description="Build-wide options keyed by config name")
    loaders: list[LoaderEntry] = Field(default_factory=list, description="Loader chain, leftmost first")
    loader_index: int = Field(default=0, ge=0, description="Index of the running loader in `loaders`")
    current_request: str | None = Field(default=None, description="Precomputed current request, if provided")
    remaining_request: str | None = Field(default=None, description="Precomputed remaining request, if provided")
    custom_interpolate_name: CustomInterpolate | None = Field(
        default=None,
        description="Resolver for tokens unknown to interpolate_name.",
    )

    @model_validator(mode="after")
    def _validate_loader_index(self) -> "LoaderContext":
        if self.loaders and self.loader_index >= len(self.loaders):
            raise ValueError("loader_index must point into loaders")
        return self

    def to_resource(self) -> ResourceDescriptor:
        """Build the descriptor interpolate_name expects for this resource."""
        return ResourceDescriptor(path=self.resource_path, custom_interpolate=self.custom_interpolate_name)


__all__ = [
    "CustomInterpolate",
    "ResourceDescriptor",
    "HashSpec",
    "RequestSegment",
    "LoaderEntry",
    "LoaderContext",
    "ValidationError",
]
