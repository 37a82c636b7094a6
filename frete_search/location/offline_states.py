"""Offline fallback for the state registry, used when IBGE is unreachable."""

from typing import List

from frete_search.models import Region, State


NORTE = Region(id=1, code="N", name="Norte")
NORDESTE = Region(id=2, code="NE", name="Nordeste")
SUDESTE = Region(id=3, code="SE", name="Sudeste")
SUL = Region(id=4, code="S", name="Sul")
CENTRO_OESTE = Region(id=5, code="CO", name="Centro-Oeste")

OFFLINE_STATES: List[State] = [
    State(12, "AC", "Acre", NORTE),
    State(27, "AL", "Alagoas", NORDESTE),
    State(16, "AP", "Amapá", NORTE),
    State(13, "AM", "Amazonas", NORTE),
    State(29, "BA", "Bahia", NORDESTE),
    State(23, "CE", "Ceará", NORDESTE),
    State(53, "DF", "Distrito Federal", CENTRO_OESTE),
    State(32, "ES", "Espírito Santo", SUDESTE),
    State(52, "GO", "Goiás", CENTRO_OESTE),
    State(21, "MA", "Maranhão", NORDESTE),
    State(51, "MT", "Mato Grosso", CENTRO_OESTE),
    State(50, "MS", "Mato Grosso do Sul", CENTRO_OESTE),
    State(31, "MG", "Minas Gerais", SUDESTE),
    State(15, "PA", "Pará", NORTE),
    State(25, "PB", "Paraíba", NORDESTE),
    State(41, "PR", "Paraná", SUL),
    State(26, "PE", "Pernambuco", NORDESTE),
    State(22, "PI", "Piauí", NORDESTE),
    State(33, "RJ", "Rio de Janeiro", SUDESTE),
    State(24, "RN", "Rio Grande do Norte", NORDESTE),
    State(43, "RS", "Rio Grande do Sul", SUL),
    State(11, "RO", "Rondônia", NORTE),
    State(14, "RR", "Roraima", NORTE),
    State(42, "SC", "Santa Catarina", SUL),
    State(35, "SP", "São Paulo", SUDESTE),
    State(28, "SE", "Sergipe", NORDESTE),
    State(17, "TO", "Tocantins", NORTE),
]
