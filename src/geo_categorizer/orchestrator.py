import json
from dataclasses import dataclass, field

from geo_categorizer.classifiers.base import ChatModel, Message, ModelTurn
from geo_categorizer.classifiers.prompt import SYSTEM_INSTRUCTIONS
from geo_categorizer.core import settings
from geo_categorizer.logger import get_logger
from geo_categorizer.models import ToolInvocation
from geo_categorizer.tools.base import ToolRegistry

logger = get_logger(__name__)


@dataclass
class OrchestrationResult:
    text: str
    steps: int
    exhausted: bool = False
    invocations: list[ToolInvocation] = field(default_factory=list)


class ClassificationOrchestrator:
    """
    Drives one model exchange: the model either answers with text or asks for
    tools, whose results are fed back before the next model turn. At most
    ``max_steps`` model turns are made; a model still asking for tools on the
    last turn ends the exchange with whatever text that turn carried.

    Errors raised by the model client are not caught here.
    """

    def __init__(
        self,
        model: ChatModel,
        tools: ToolRegistry,
        max_steps: int = settings.DEFAULT_MAX_STEPS,
        temperature: float = settings.DEFAULT_TEMPERATURE,
    ):
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        self.model = model
        self.tools = tools
        self.max_steps = max_steps
        self.temperature = temperature

    def run(self, prompt: str) -> OrchestrationResult:
        messages: list[Message] = [
            {"role": "system", "content": SYSTEM_INSTRUCTIONS},
            {"role": "user", "content": prompt},
        ]
        declarations = self.tools.declarations() or None
        invocations: list[ToolInvocation] = []
        turn = ModelTurn()

        for step in range(1, self.max_steps + 1):
            turn = self.model.complete(
                messages,
                tools=declarations,
                temperature=self.temperature,
            )
            if not turn.wants_tools:
                logger.debug("[LLM] Final answer after %s step(s).", step)
                return OrchestrationResult(text=turn.text, steps=step, invocations=invocations)

            if step == self.max_steps:
                break

            messages.append(turn.as_message())
            for call in turn.tool_calls:
                logger.info("[TOOL] Step %s: model requested %s", step, call.name)
                invocation = self.tools.record(call.name, call.arguments)
                invocations.append(invocation)
                messages.append(
                    {
                        "role": "tool",
                        "tool_call_id": call.id,
                        "content": _tool_message_content(invocation),
                    }
                )

        logger.warning(
            "[LLM] Step bound of %s reached while the model was still requesting tools.",
            self.max_steps,
        )
        return OrchestrationResult(
            text=turn.text,
            steps=self.max_steps,
            exhausted=True,
            invocations=invocations,
        )


def _tool_message_content(invocation: ToolInvocation) -> str:
    if invocation.error is not None:
        return json.dumps({"error": invocation.error})
    return json.dumps(invocation.result)
