"""Grounded answer generation."""

from webrag.llm.client import LLMClient
from webrag.llm.models import RELAXED_SAFETY_SETTINGS, SafetySetting
from webrag.llm.prompts import GroundedPromptTemplate, truncate_context
from webrag.logging_config import get_logger
from webrag.rag.models import AnswerContext

logger = get_logger(__name__)

DEFAULT_CONTEXT_CHAR_BUDGET = 3000


class AnswerGenerator:
    """Answers a question from a single retrieved page.

    The page body is cut to `context_char_budget` characters and the model
    output is returned verbatim.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        prompt_template: GroundedPromptTemplate | None = None,
        context_char_budget: int = DEFAULT_CONTEXT_CHAR_BUDGET,
        safety_settings: tuple[SafetySetting, ...] = RELAXED_SAFETY_SETTINGS,
    ) -> None:
        """Initialize the answer generator.

        Args:
            llm_client: LLM client for generation.
            prompt_template: Prompt template for grounded answers.
            context_char_budget: Characters of body passed to the model.
            safety_settings: Safety overrides sent with every request.
        """
        self._llm_client = llm_client
        self._prompt_template = prompt_template or GroundedPromptTemplate()
        self._context_char_budget = context_char_budget
        self._safety_settings = safety_settings

    def build_prompt(self, question: str, context: AnswerContext) -> str:
        """Build the prompt sent to the model for this question."""
        truncated = truncate_context(context.body, self._context_char_budget)
        return self._prompt_template.build_prompt(
            question=question,
            title=context.title,
            context=truncated,
        )

    async def answer(self, question: str, context: AnswerContext) -> str:
        """Generate an answer using only the supplied context.

        Raises:
            LLMError: If generation fails.
        """
        prompt = self.build_prompt(question, context)
        logger.debug(
            "Generating answer",
            extra={"prompt_chars": len(prompt), "model": self._llm_client.model_name},
        )
        result = await self._llm_client.generate_text(
            prompt=prompt,
            safety_settings=self._safety_settings,
        )
        return result.content
