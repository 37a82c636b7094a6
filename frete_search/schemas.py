"""Wire models for the listings API and the geographic registry."""

import math
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from frete_search.models import Carrier, Listing, Region, State, parse_timestamp


class _Payload(BaseModel):
    """Base for remote payloads: unknown keys are ignored."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        extra='ignore'
    )


class CarrierPayload(_Payload):
    """Carrier ("empresa") block of a listing."""
    name: Optional[str] = Field(None, alias="nome")
    phone: Optional[str] = Field(None, alias="telefone")
    logo: Optional[str] = None


class ListingPayload(_Payload):
    """A listing as returned by ``GET /api/fretes/todos``."""
    id: Union[int, str]
    origin: Optional[str] = Field(None, alias="cidadeColeta")
    destination: Optional[str] = Field(None, alias="cidadeEntrega")
    product: Optional[str] = Field(None, alias="produto")
    cargo_type: Optional[str] = Field(None, alias="tipoCarga")
    total_weight: Optional[float] = Field(None, alias="pesoTotal")
    weight_unit: Optional[str] = Field(None, alias="unidadePeso")
    freight_value: Optional[float] = Field(None, alias="valorFrete")
    pays_toll: Optional[bool] = Field(None, alias="pagaPedagio")
    vehicles: List[str] = Field(default_factory=list, alias="veiculos")
    bodies: List[str] = Field(default_factory=list, alias="carrocerias")
    carrier: Optional[CarrierPayload] = Field(None, alias="empresa")
    created_at: Union[str, int, float, None] = Field(None, alias="createdAt")

    @field_validator('total_weight', 'freight_value', mode='before')
    @classmethod
    def lenient_number(cls, v: Any) -> Optional[float]:
        """Unparsable or non-finite numbers become None instead of rejecting the listing."""
        if v is None or isinstance(v, bool):
            return None
        try:
            number = float(v)
        except (TypeError, ValueError):
            return None
        # "NaN" and "inf" parse as floats but are not prices or weights
        return number if math.isfinite(number) else None

    @field_validator('vehicles', 'bodies', mode='before')
    @classmethod
    def tag_list(cls, v: Any) -> List[str]:
        """Accept null or a list with stray non-string entries."""
        if not isinstance(v, (list, tuple)):
            return []
        return [str(tag).strip() for tag in v if tag is not None and str(tag).strip()]

    @field_validator('carrier', mode='before')
    @classmethod
    def optional_carrier(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    def to_listing(self) -> Listing:
        """Convert to the domain model."""
        carrier = None
        if self.carrier is not None:
            carrier = Carrier(
                name=self.carrier.name,
                phone=self.carrier.phone,
                logo_url=self.carrier.logo
            )
        return Listing(
            id=str(self.id),
            origin=self.origin or "",
            destination=self.destination or "",
            product=self.product or "",
            cargo_type=self.cargo_type or "",
            total_weight=self.total_weight,
            weight_unit=self.weight_unit or "",
            freight_value=self.freight_value,
            pays_toll=self.pays_toll,
            vehicles=list(self.vehicles),
            bodies=list(self.bodies),
            created_at=parse_timestamp(self.created_at),
            carrier=carrier,
        )


class RegionPayload(_Payload):
    """IBGE macro-region ("regiao")."""
    id: int
    sigla: str
    nome: str


class StatePayload(_Payload):
    """IBGE state ("UF") record."""
    id: int
    sigla: str
    nome: str
    regiao: RegionPayload

    def to_state(self) -> State:
        """Convert to the domain model."""
        return State(
            id=self.id,
            code=self.sigla.strip().upper(),
            name=self.nome.strip(),
            region=Region(id=self.regiao.id, code=self.regiao.sigla, name=self.regiao.nome),
        )


class CityPayload(_Payload):
    """IBGE municipality record; only the name is used."""
    id: Optional[int] = None
    nome: str
