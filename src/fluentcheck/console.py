"""Console rendering of assertion results and session summaries."""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

import typer

from fluentcheck.config import RenderConfig

if TYPE_CHECKING:
    from fluentcheck.assertions.chain import AssertionChain
    from fluentcheck.reporter import TestSessionResult


class ConsoleRenderer:
    """Turns chains and session results into (optionally coloured) text."""

    def __init__(self, config: RenderConfig):
        self.config = config

    def _style(self, text: str, **kwargs: Any) -> str:
        if not self.config.use_colors:
            return text
        return typer.style(text, **kwargs)

    def _symbols(self) -> tuple[str, str]:
        if self.config.use_unicode_symbols:
            return "✓", "✗"
        return "+", "-"

    def build_assertion_message(self, chain: AssertionChain[Any]) -> str:
        """Label followed by every step, joined by its connector."""
        if not chain.steps:
            return "No assertions made"

        label = chain.label.lstrip("&")
        steps = chain.steps
        message = f"{label} {steps[0].sentence.format_with_conjugation(label)}"
        for prev, curr in zip(steps, steps[1:]):
            op = prev.logical_op
            separator = f" {op.name} " if op is not None else " [MISSING OP] "
            message += f"{separator}{curr.sentence.format_with_conjugation(label)}"
        return message

    def build_failure_details(self, chain: AssertionChain[Any]) -> str:
        """One indented line per step, marked pass/fail, with observed values on failures."""
        passed_symbol, failed_symbol = self._symbols()
        label = chain.label.lstrip("&")
        lines = []
        for step in chain.steps:
            text = step.sentence.format_with_conjugation(label)
            if not step.passed and step.sentence.actual is not None:
                text = f"{text} (got {step.sentence.actual})"
            symbol = passed_symbol if step.passed else failed_symbol
            lines.append(f"  {symbol} {text}")
        return "\n".join(lines)

    def render_success(self, chain: AssertionChain[Any]) -> str:
        if not self.config.show_success_details:
            return ""
        prefix = self._symbols()[0] + " "
        return self._style(prefix + self.build_assertion_message(chain), fg=typer.colors.GREEN)

    def render_failure(self, chain: AssertionChain[Any]) -> tuple[str, str]:
        prefix = self._symbols()[1] + " "
        header = prefix + self._style(
            self.build_assertion_message(chain), fg=typer.colors.RED, bold=True
        )
        return header, self.build_failure_details(chain)

    def render_session_summary(self, result: TestSessionResult) -> str:
        passed_msg = f"{result.passed_count} passed"
        failed_msg = f"{result.failed_count} failed"
        if result.passed_count:
            passed_msg = self._style(passed_msg, fg=typer.colors.GREEN)
        if result.failed_count:
            failed_msg = self._style(failed_msg, fg=typer.colors.RED, bold=True)

        output = f"\nTest Results:\n  {passed_msg} / {failed_msg}\n"
        if result.failures:
            output += "\nFailure Details:\n"
            for i, failure in enumerate(result.failures, start=1):
                header, details = self.render_failure(failure)
                output += f"  {i}. {header}\n"
                for line in details.splitlines():
                    output += f"     {line}\n"
        return output

    def print_success(self, chain: AssertionChain[Any]) -> None:
        message = self.render_success(chain)
        if message:
            typer.echo(message)

    def print_failure(self, chain: AssertionChain[Any]) -> None:
        header, details = self.render_failure(chain)
        typer.echo(header)
        passed_symbol = self._symbols()[0]
        for line in details.splitlines():
            passed = line.lstrip().startswith(passed_symbol)
            color = typer.colors.GREEN if passed else typer.colors.RED
            typer.echo(self._style(line, fg=color))

    def print_session_summary(self, result: TestSessionResult) -> None:
        typer.echo(self.render_session_summary(result))
