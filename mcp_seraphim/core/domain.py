"""
Domain Models - Pure business entities

No external dependencies. These represent the core business concepts.
Records are frozen; sequences are tuples so a value handed out by the
cache can't be mutated under another caller.
"""
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class RawEntry:
    """One upstream catalog item (directory listing row)"""
    filename: str


@dataclass(frozen=True)
class BrandIdentity:
    """Display name + URL-safe identifier derived from a filename"""
    display_name: str
    slug: str  # filename minus extension, region suffix kept


@dataclass(frozen=True)
class ModelVariant:
    """A specific SKU of a model"""
    model_number: str
    variant_name: str

    def to_dict(self) -> dict[str, str]:
        return {"modelNumber": self.model_number, "variantName": self.variant_name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ModelVariant":
        return cls(
            model_number=str(data["modelNumber"]),
            variant_name=str(data["variantName"]),
        )


@dataclass(frozen=True)
class ModelRecord:
    """A phone model with its variants, grouped under an optional series"""
    main_model_name: str
    variants: tuple[ModelVariant, ...]
    codename: Optional[str] = None
    series: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "mainModelName": self.main_model_name,
            "variants": [v.to_dict() for v in self.variants],
        }
        if self.codename is not None:
            data["codename"] = self.codename
        if self.series is not None:
            data["series"] = self.series
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ModelRecord":
        return cls(
            main_model_name=str(data["mainModelName"]),
            variants=tuple(ModelVariant.from_dict(v) for v in data.get("variants", [])),
            codename=data.get("codename"),
            series=data.get("series"),
        )


@dataclass(frozen=True)
class Brand:
    """A manufacturer: one source document, zero or more parsed models"""
    name: str
    slug: str
    filename: str
    models: tuple[ModelRecord, ...] = ()

    def with_models(self, models) -> "Brand":
        return Brand(self.name, self.slug, self.filename, tuple(models))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "slug": self.slug,
            "filename": self.filename,
            "models": [m.to_dict() for m in self.models],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Brand":
        return cls(
            name=str(data["name"]),
            slug=str(data["slug"]),
            filename=str(data["filename"]),
            models=tuple(ModelRecord.from_dict(m) for m in data.get("models", [])),
        )


@dataclass(frozen=True)
class ModelHit:
    """A flattened global search row: one per variant of a matching model"""
    brand: str
    brand_slug: str
    main_model_name: str
    model_number: str
    variant_name: str
    codename: Optional[str] = None


@dataclass(frozen=True)
class GlobalSearchResult:
    """Result of a combined search: model hits win over brand matches"""
    query: str
    mode: str  # "models" or "brands"
    hits: tuple[ModelHit, ...] = ()
    brands: tuple[Brand, ...] = ()


@dataclass
class CacheEntry:
    """A cached payload with its lifetime (epoch milliseconds)"""
    payload: Any
    created_at: int
    expires_at: int
    kind: Optional[str] = None

    def is_expired(self, now_ms: int) -> bool:
        return now_ms > self.expires_at


@dataclass(frozen=True)
class CacheInfo:
    """Introspection for "last updated" displays"""
    exists: bool
    age_ms: Optional[int] = None
    expires_in_ms: Optional[int] = None


@dataclass
class BrandModels:
    """Models of a single brand, and where they came from"""
    brand: Brand
    models: list[ModelRecord] = field(default_factory=list)
    from_cache: bool = False
    info: Optional[CacheInfo] = None
