"""Structured prompts.

A :class:`Prompt` is an ordered list of typed :class:`PromptSection`
objects.  The first section is the instruction; the ``with_*`` methods
append labelled sections and return the prompt itself so calls can be
chained.  :meth:`Prompt.render` joins everything into the text sent to a
provider.

Example usage:

>>> from llmkit.prompt import Prompt
>>> Prompt("Summarize this").with_context("doc A").with_directive("be concise").render()
'Summarize this\\n\\nContext: doc A\\n\\nDirective: be concise'
"""

from dataclasses import dataclass
from typing import List, Tuple

INSTRUCTION = "instruction"
CONTEXT = "context"
DIRECTIVE = "directive"
OUTPUT = "output"
EXAMPLE = "example"

# Label prefixed to each section kind when rendering
SECTION_LABELS = {
    INSTRUCTION: "",
    CONTEXT: "Context: ",
    DIRECTIVE: "Directive: ",
    OUTPUT: "Expected Output: ",
    EXAMPLE: "Example: ",
}


@dataclass(frozen=True)
class PromptSection:
    """A single piece of a prompt."""
    content: str
    kind: str = INSTRUCTION

    def render(self) -> str:
        label = SECTION_LABELS.get(self.kind, f"{self.kind}: ")
        return label + self.content


class Prompt:
    """Ordered, typed prompt sections."""

    def __init__(self, instruction: str) -> None:
        self._sections: List[PromptSection] = [PromptSection(instruction, INSTRUCTION)]

    @property
    def sections(self) -> Tuple[PromptSection, ...]:
        return tuple(self._sections)

    def with_section(self, kind: str, content: str) -> "Prompt":
        """Append a section of any kind; unknown kinds render as ``kind: ``."""
        self._sections.append(PromptSection(content, kind))
        return self

    def with_context(self, context: str) -> "Prompt":
        return self.with_section(CONTEXT, context)

    def with_directive(self, directive: str) -> "Prompt":
        return self.with_section(DIRECTIVE, directive)

    def with_output(self, output: str) -> "Prompt":
        return self.with_section(OUTPUT, output)

    def with_example(self, example: str) -> "Prompt":
        return self.with_section(EXAMPLE, example)

    def render(self) -> str:
        return "\n\n".join(section.render() for section in self._sections)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Prompt(sections={len(self._sections)})"


def new_prompt(instruction: str) -> Prompt:
    """Create a prompt with a single instruction section."""
    return Prompt(instruction)


__all__ = ["PromptSection", "Prompt", "new_prompt", "SECTION_LABELS"]
