"""
Heuristic rule tables for line classification and quantity extraction.

The defaults target Brazilian Portuguese school supply lists. Every table
can be replaced or extended from a JSON file with ``load_rule_tables``.
"""

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Tuple, Union

from .exceptions import RuleTableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleTables:
    """Named word sets and thresholds consumed by the classifier and extractor."""
    header_denylist: FrozenSet[str]
    list_markers: str
    explicit_quantity_markers: FrozenSet[str]
    attribute_markers: FrozenSet[str]
    dimension_separators: FrozenSet[str]
    noise_words: FrozenSet[str]
    noise_characters: str
    # (regex, replacement) pairs applied to the start of a line
    ocr_repairs: Tuple[Tuple[str, str], ...]
    page_separator_prefix: str = "--"
    min_line_length: int = 4
    min_name_length: int = 3


DEFAULT_HEADER_DENYLIST = frozenset({
    "total",
    "obrigatório", "obrigatorio", "obrigatória", "obrigatoria",
    "necessário", "necessario",
    "ensino fundamental", "ensino médio", "ensino medio",
    "educação infantil", "educacao infantil", "nível de ensino", "nivel de ensino",
    "ano letivo", "série", "turma",
    "atenção", "atencao", "aviso", "importante",
    "observação", "observacao", "obs:", "obs.",
    "lista de material", "lista de materiais", "material escolar",
    "material de uso", "uso individual", "uso coletivo",
    "escola municipal", "escola estadual", "nome da escola",
    "colégio", "colegio", "nome do aluno", "nome da aluna", "aluno(a)", "professor",
    "responsáve", "responsave",
    "entregar", "entrega", "identificad", "etiquetad",
    "sugestão", "sugestao",
    "orçamento", "orcamento",
})

DEFAULT_EXPLICIT_QUANTITY_MARKERS = frozenset({
    "x",
    "un", "und", "unds", "unid", "unids", "unidade", "unidades",
    "cx", "cxs", "caixa", "caixas",
    "pct", "pcts", "pacote", "pacotes",
    "pc", "pcs", "pç", "pçs", "peça", "peças", "peca", "pecas",
    "par", "pares",
    "jogo", "jogos", "kit", "kits", "conjunto", "conjuntos",
    "dz", "dúzia", "dúzias", "duzia", "duzias",
})

DEFAULT_ATTRIBUTE_MARKERS = frozenset({
    "fl", "fls", "folha", "folhas",
    "g", "gr", "grs", "grama", "gramas", "gramatura", "kg", "mg",
    "ml", "l", "lt", "lts", "litro", "litros",
    "mm", "cm", "m", "mt", "mts", "metro", "metros",
    "pol", "polegada", "polegadas",
    "cor", "cores",
    "pág", "págs", "pag", "pags", "página", "páginas", "pagina", "paginas",
    "matéria", "matérias", "materia", "materias",
})

DEFAULT_NOISE_WORDS = frozenset({
    # colours
    "azul", "preto", "preta", "vermelho", "vermelha", "verde",
    "amarelo", "amarela", "branco", "branca", "rosa", "roxo", "roxa",
    "laranja", "marrom", "cinza",
    "colorido", "colorida", "coloridos", "coloridas",
    # size
    "grande", "grandes", "pequeno", "pequena", "pequenos", "pequenas",
    "médio", "média", "medio", "media", "tamanho", "tam",
    "grosso", "grossa", "fino", "fina",
    # packaging
    "embalagem", "unidade", "unidades", "un", "und", "unid",
    "nº", "n°",
})

DEFAULT_RULES = RuleTables(
    header_denylist=DEFAULT_HEADER_DENYLIST,
    list_markers="-–—•*·▪●○◦■□►>✓✔",
    explicit_quantity_markers=DEFAULT_EXPLICIT_QUANTITY_MARKERS,
    attribute_markers=DEFAULT_ATTRIBUTE_MARKERS,
    dimension_separators=frozenset({"x"}),
    noise_words=DEFAULT_NOISE_WORDS,
    noise_characters="-–—•*·▪●○◦■□►>✓✔_:;,.!?()[]{}\"'“”‘’|/\\#+=&%$@~^`",
    ocr_repairs=(
        (r"^[|lI](?=\s)", "1"),
        (r"^[OoQ][lI1|](?=\s)", "01"),
        (r"^[|lI]([0-9])(?=\s)", r"1\1"),
        (r"^([0-9])[Oo](?=\s)", r"\g<1>0"),
    ),
)

_SET_FIELDS = {
    "header_denylist",
    "explicit_quantity_markers",
    "attribute_markers",
    "dimension_separators",
    "noise_words",
}


def _coerce(name: str, value: Any) -> Any:
    if name in _SET_FIELDS:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise RuleTableError(f"'{name}' must be a list of strings")
        return frozenset(v.lower() for v in value)
    if name == "ocr_repairs":
        try:
            return tuple((str(pattern), str(repl)) for pattern, repl in value)
        except (TypeError, ValueError):
            raise RuleTableError("'ocr_repairs' must be a list of [pattern, replacement] pairs")
    if name in ("min_line_length", "min_name_length"):
        if not isinstance(value, int) or value < 0:
            raise RuleTableError(f"'{name}' must be a non-negative integer")
        return value
    if not isinstance(value, str):
        raise RuleTableError(f"'{name}' must be a string")
    return value


def rule_tables_from_dict(data: Dict[str, Any], base: RuleTables = DEFAULT_RULES) -> RuleTables:
    """
    Build rule tables from a mapping.

    Keys override the matching field of ``base``. With ``"extend": true``
    set-valued fields are merged into the base sets instead of replacing them.
    """
    known = {f.name for f in fields(RuleTables)}
    extend = bool(data.get("extend", False))
    overrides = {}

    for key, value in data.items():
        if key == "extend":
            continue
        if key not in known:
            raise RuleTableError(f"Unknown rule table: {key}")
        coerced = _coerce(key, value)
        if extend and key in _SET_FIELDS:
            coerced = getattr(base, key) | coerced
        overrides[key] = coerced

    return replace(base, **overrides)


def load_rule_tables(path: Union[str, Path], base: RuleTables = DEFAULT_RULES) -> RuleTables:
    """Load rule tables from a JSON file on top of ``base``."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RuleTableError(f"Could not load rule tables from {path}: {e}")

    if not isinstance(data, dict):
        raise RuleTableError(f"Rule table file {path} must contain a JSON object")

    rules = rule_tables_from_dict(data, base)
    logger.info(f"Loaded rule tables from {path} ({len(data)} keys)")
    return rules
