"""
Formula registry and batch recompute.

The registry keeps one parsed formula per panel attribute so that a
dimension edit only costs a tree walk per formula. Formula text is
re-parsed only when it actually changes.

``recompute`` evaluates every formula of a template against one binding
set. A failing formula never stops the batch: each formula gets its own
outcome, either a number or an error value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from panelcalc.core.formula_lang.compiler import evaluate_formula, parse_formula
from panelcalc.core.ir.bindings import BindingSet
from panelcalc.core.ir.diagnostics import DuplicateName, EvaluationError, ParseError, is_error
from panelcalc.core.ir.templates import Formula, Template

logger = logging.getLogger(__name__)

Outcome = float | EvaluationError
RecomputeResult = dict[str, Outcome]


class FormulaRegistry:
    """Parsed formulas keyed by qualified attribute name, in insertion order."""

    def __init__(self) -> None:
        self._sources: dict[str, str] = {}
        self._entries: dict[str, Formula | ParseError] = {}
        self.parse_count = 0

    @classmethod
    def from_template(cls, template: Template) -> FormulaRegistry:
        registry = cls()
        registry.sync(template)
        return registry

    def set_source(self, name: str, source: str) -> Formula | ParseError:
        """Store formula text for ``name``, parsing it only if it changed."""
        cached = self._entries.get(name)
        if cached is not None and self._sources[name] == source:
            return cached

        entry = parse_formula(source, name=name)
        self.parse_count += 1
        self._sources[name] = source
        self._entries[name] = entry
        logger.debug("Parsed formula %s: %s", name, "error" if isinstance(entry, ParseError) else "ok")
        return entry

    def sync(self, template: Template) -> None:
        """Bring the registry in line with a template's current formulas.

        Unchanged formulas keep their cached AST; formulas that are no longer
        in the template are dropped. Order follows the template.
        """
        wanted = template.formula_sources()
        for name, source in wanted:
            self.set_source(name, source)
        names = [name for name, _ in wanted]
        self._entries = {name: self._entries[name] for name in names}
        self._sources = {name: self._sources[name] for name in names}

    def remove(self, name: str) -> None:
        self._entries.pop(name, None)
        self._sources.pop(name, None)

    def get(self, name: str) -> Formula | ParseError | None:
        return self._entries.get(name)

    def source(self, name: str) -> str | None:
        return self._sources.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def items(self) -> list[tuple[str, Formula | ParseError]]:
        return list(self._entries.items())

    def errors(self) -> dict[str, ParseError]:
        """Formulas whose current source does not parse."""
        return {n: e for n, e in self._entries.items() if isinstance(e, ParseError)}

    def recompute(self, bindings: BindingSet) -> RecomputeResult:
        """Evaluate every registered formula against ``bindings``."""
        return _recompute_entries(self._entries.items(), bindings)


def recompute(
    template: Template | FormulaRegistry | Iterable[Formula],
    bindings: BindingSet,
) -> RecomputeResult:
    """Evaluate every formula of a template, one outcome per formula.

    Args:
        template: A Template (parsed on the fly), a FormulaRegistry (cached
            ASTs), or parsed Formulas. A name used by more than one Formula
            gets a DuplicateName outcome.
        bindings: The parameter snapshot for this pass.

    Returns:
        Qualified formula name -> number, or the error for that formula.
    """
    if isinstance(template, FormulaRegistry):
        return template.recompute(bindings)
    if isinstance(template, Template):
        return FormulaRegistry.from_template(template).recompute(bindings)
    return _recompute_entries(((f.name, f) for f in template), bindings)


def _recompute_entries(
    entries: Iterable[tuple[str, Formula | ParseError]],
    bindings: BindingSet,
) -> RecomputeResult:
    results: RecomputeResult = {}
    duplicates: set[str] = set()
    for name, entry in entries:
        if name in results:
            duplicates.add(name)
            continue
        if isinstance(entry, ParseError):
            results[name] = entry
            continue
        results[name] = evaluate_formula(entry, bindings)
    for name in sorted(duplicates):
        logger.warning("Formula name %r is used more than once in one batch", name)
        results[name] = DuplicateName(name=name)

    failed = sum(1 for outcome in results.values() if is_error(outcome))
    logger.debug("Recomputed %d formulas, %d failed", len(results), failed)
    return results
