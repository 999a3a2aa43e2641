"""
An LLM that replays canned responses, for testing the AI flows without network access.

A response starting with "raise:" makes the call fail with the rest of the text as message.

The mock is neither a chat model nor a function calling model, so
``as_structured_llm`` drives it through ``complete`` with the chat messages
rendered into a single prompt.

PROMPT> python -m codecraft.llm_util.response_mockllm
"""
import itertools
from typing import Any, Sequence
from llama_index.core.llms import MockLLM, ChatResponse, ChatMessage, CompletionResponse, MessageRole

class MockLLMError(RuntimeError):
    pass

class ResponseMockLLM(MockLLM):
    """
    Cycles through the given responses. The messages of each chat call are
    recorded in ``received_messages`` and the prompt of each completion call in
    ``received_prompts``, so tests can inspect what was sent.
    """
    def __init__(self, responses: list[str], **kwargs):
        if not responses:
            raise ValueError("At least one response is required")
        max_tokens = max(len(response) for response in responses)
        super().__init__(max_tokens=max_tokens, **kwargs)
        object.__setattr__(self, 'responses', responses)
        object.__setattr__(self, 'response_cycle', itertools.cycle(responses))
        object.__setattr__(self, 'received_messages', [])
        object.__setattr__(self, 'received_prompts', [])

    def _next_response(self) -> str:
        response_text = next(self.response_cycle)
        if response_text.startswith("raise:"):
            raise MockLLMError(response_text.split(":", 1)[1])
        return response_text

    def chat(self, messages: Sequence[ChatMessage], **kwargs: Any) -> ChatResponse:
        self.received_messages.append(list(messages))
        response_text = self._next_response()
        return ChatResponse(message=ChatMessage(role=MessageRole.ASSISTANT, content=response_text))

    def complete(self, prompt: str, formatted: bool = False, **kwargs: Any) -> CompletionResponse:
        self.received_prompts.append(prompt)
        return super().complete(prompt, formatted=formatted, **kwargs)

    def _generate_text(self, length: int) -> str:
        return self._next_response()

if __name__ == "__main__":
    llm = ResponseMockLLM(responses=['{"suggestedRisks": ["Scope creep"]}', "raise:service unavailable"])
    message = ChatMessage(role=MessageRole.USER, content="List risks as JSON.")
    print(llm.chat([message]))
    try:
        llm.chat([message])
    except MockLLMError as e:
        print(f"failed as expected: {e}")
