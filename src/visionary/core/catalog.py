"""
Load the studio catalog from the bundled catalog.yaml file.

The catalog defines the enhancer controls (label and options per dimension),
the initial categories, the starter assets and the known image models. It is
loaded once per process and validated with pydantic.
"""

import importlib.resources
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from visionary.core.models import AUTO, CONTROL_DIMENSIONS, Asset, Category
from visionary.utils.exceptions import ConfigurationError


class EnhancerSpec(BaseModel):
    """Schema for one enhancer dimension."""

    label: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=1)

    @field_validator("options")
    @classmethod
    def _auto_first(cls, options: list[str]) -> list[str]:
        if options[0] != AUTO:
            raise ValueError(f"first option must be {AUTO!r}")
        return options


class CategorySpec(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""


class StarterAssetSpec(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    prompt_snippet: str = Field(..., min_length=1)
    description: str = ""
    image: str | None = None


class CatalogSchema(BaseModel):
    """Schema for catalog.yaml."""

    model_config = {"extra": "allow"}

    image_models: list[str] = Field(default_factory=list)
    enhancers: dict[str, EnhancerSpec]
    categories: list[CategorySpec] = Field(default_factory=list)
    starter_assets: list[StarterAssetSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_references(self) -> "CatalogSchema":
        missing = [dim for dim in CONTROL_DIMENSIONS if dim not in self.enhancers]
        if missing:
            raise ValueError(f"enhancers missing dimensions: {', '.join(missing)}")
        names = {c.name for c in self.categories}
        for asset in self.starter_assets:
            if asset.category not in names:
                raise ValueError(
                    f"starter asset {asset.name!r} references unknown category {asset.category!r}"
                )
        return self


# Module-level cache for the parsed catalog
_catalog: CatalogSchema | None = None


def _load_catalog() -> CatalogSchema:
    """Load and validate catalog.yaml from the package. Cached after first call.

    Raises:
        ConfigurationError: If the file is missing, malformed, or fails validation.
    """
    global _catalog
    if _catalog is not None:
        return _catalog

    try:
        with (
            importlib.resources.files("visionary")
            .joinpath("catalog.yaml")
            .open(encoding="utf-8") as f
        ):
            raw = f.read()
    except FileNotFoundError as e:
        raise ConfigurationError(
            "catalog.yaml not found. This file is required and should be bundled with the package."
        ) from e

    _catalog = parse_catalog(raw)
    return _catalog


def parse_catalog(raw: str) -> CatalogSchema:
    """
    Parse and validate catalog YAML text.

    Raises:
        ConfigurationError: If the YAML is malformed, empty, or fails validation.
    """
    try:
        data: Any = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse catalog.yaml: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError("catalog.yaml is empty or not a mapping.")

    try:
        return CatalogSchema(**data)
    except ValidationError as e:
        errors = "\n".join(
            f"  - {'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(f"Invalid catalog.yaml structure:\n{errors}") from e


def enhancer_options() -> dict[str, list[str]]:
    """Return the option list per enhancer dimension, in canonical order."""
    catalog = _load_catalog()
    return {dim: list(catalog.enhancers[dim].options) for dim in CONTROL_DIMENSIONS}


def enhancer_label(dimension: str) -> str:
    """Return the display label for an enhancer dimension."""
    return _load_catalog().enhancers[dimension].label


def initial_categories() -> tuple[Category, ...]:
    return tuple(
        Category(name=c.name, description=c.description) for c in _load_catalog().categories
    )


def starter_assets() -> tuple[Asset, ...]:
    return tuple(
        Asset(
            id=a.id,
            name=a.name,
            category=a.category,
            prompt_snippet=a.prompt_snippet,
            image=a.image,
            description=a.description,
        )
        for a in _load_catalog().starter_assets
    )


def image_models(default: str | None = None) -> list[str]:
    """Return known image models, with default first when given (added if unknown)."""
    models = list(_load_catalog().image_models)
    if not default:
        return models
    return [default] + [m for m in models if m != default]
