"""Text formatting utilities for the TUI.

Hides the details of how assistant replies are classified for display
and how notation the terminal cannot render is cleaned up.
"""

import re
from enum import Enum

CODE_INDICATORS = (
    "def ", "class ", "import ", "from ", "async def ",
    "if __name__", "return ", "yield ", "for ", "while ",
)


class ContentKind(str, Enum):
    """How a message body should be rendered."""

    CODE = "code"
    PLAIN = "plain"
    MARKDOWN = "markdown"


def clean_latex(text: str) -> str:
    """Convert LaTeX notation to plain text equivalents.

    Handles common LaTeX patterns that Rich cannot render:
    - \\( ... \\) and \\[ ... \\] delimiters are dropped
    - $...$ and $$...$$ delimiters are dropped
    - a handful of commands (\\frac, \\sqrt, \\times, ...) become ASCII
    """
    text = re.sub(r'\\\(\s*', '', text)
    text = re.sub(r'\s*\\\)', '', text)
    text = re.sub(r'\\\[\s*', '', text)
    text = re.sub(r'\s*\\\]', '', text)

    # $$ before single $
    text = re.sub(r'\$\$\s*', '', text)
    text = re.sub(r'(?<!\\)\$([^$]+)(?<!\\)\$', r'\1', text)

    text = re.sub(r'\\frac\{([^}]*)\}\{([^}]*)\}', r'(\1)/(\2)', text)
    text = re.sub(r'\\sqrt\{([^}]*)\}', r'sqrt(\1)', text)
    replacements = {
        r'\\times': 'x',
        r'\\cdot': '*',
        r'\\pm': '+/-',
        r'\\leq': '<=',
        r'\\geq': '>=',
        r'\\neq': '!=',
        r'\\approx': '~=',
        r'\\infty': 'infinity',
        r'\\ldots': '...',
    }
    for pattern, replacement in replacements.items():
        text = re.sub(pattern, replacement, text)
    text = re.sub(r'\\text(?:bf|it)?\{([^}]*)\}', r'\1', text)

    return text


def classify_content(content: str) -> ContentKind:
    """Decide how an assistant reply is displayed.

    Bare multi-line code is fenced, multi-line prose without fences is kept
    verbatim, everything else goes through the Markdown renderer.
    """
    stripped = content.strip()
    has_fence = "```" in stripped
    is_multiline = "\n" in stripped

    if is_multiline and not has_fence and stripped.startswith(CODE_INDICATORS):
        return ContentKind.CODE
    if is_multiline and not has_fence:
        return ContentKind.PLAIN
    return ContentKind.MARKDOWN


def fence_code(content: str, language: str = "python") -> str:
    return f"```{language}\n{content.strip()}\n```"
