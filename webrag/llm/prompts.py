"""Prompt templates for grounded answers."""

from abc import ABC, abstractmethod
from typing import Any

FALLBACK_ANSWER = "I couldn't find an answer."


def truncate_context(body: str, budget: int) -> str:
    """Keep exactly the first `budget` characters of a document body.

    The cut is not aligned to words or sentences.
    """
    return body[:budget]


class PromptTemplate(ABC):
    """Abstract base class for prompt templates."""

    @abstractmethod
    def format(self, **kwargs: Any) -> str:
        """Format the template with provided variables.

        Args:
            **kwargs: Template variables.

        Returns:
            Formatted prompt string.
        """
        ...


class GroundedPromptTemplate(PromptTemplate):
    """Prompt asking the model to answer from one web page only.

    The model is told to reply with FALLBACK_ANSWER when the page does not
    contain the answer. Whether it complies is not checked.
    """

    DEFAULT_TEMPLATE = (
        "Analyze this webpage content:\n"
        "Title: {title}\n"
        "Content: {context}\n"
        "\n"
        "Question: {question}\n"
        "\n"
        'Answer using ONLY the content above. If unsure, say: "{fallback}"'
    )

    def __init__(self, template: str | None = None) -> None:
        """Initialize the template.

        Args:
            template: Custom template with {title}, {context}, {question}
                and {fallback} placeholders.
        """
        self.template = template or self.DEFAULT_TEMPLATE

    def format(self, **kwargs: Any) -> str:
        """Format the template.

        Args:
            **kwargs: Must include 'title', 'context' and 'question'.

        Returns:
            Formatted prompt.
        """
        kwargs.setdefault("fallback", FALLBACK_ANSWER)
        return self.template.format(**kwargs)

    def build_prompt(self, question: str, title: str, context: str) -> str:
        """Build the prompt for an already truncated context.

        Args:
            question: User question.
            title: Page title.
            context: Page body, truncated to the context budget.

        Returns:
            Complete prompt text.
        """
        return self.format(title=title, context=context, question=question)
