import unittest
from pydantic import BaseModel
from codecraft.ai.llm_json import LLMResponseFormatError, chat_json
from codecraft.llm_util.response_mockllm import MockLLMError, ResponseMockLLM

class Greeting(BaseModel):
    text: str

class TestChatJson(unittest.TestCase):
    def test_validates_reply(self):
        # Arrange
        llm = ResponseMockLLM(responses=['{"text": "hello"}'])

        # Act
        result, metadata = chat_json(llm, "  Be polite.  ", " Say hello. ", Greeting)

        # Assert
        self.assertEqual(result, Greeting(text="hello"))
        self.assertEqual(metadata["llm_classname"], llm.class_name())
        self.assertIn("duration", metadata)
        self.assertEqual(len(llm.received_prompts), 1)
        prompt = llm.received_prompts[0]
        self.assertIn("Be polite.", prompt)
        self.assertIn("Say hello.", prompt)
        self.assertLess(prompt.index("Be polite."), prompt.index("Say hello."))

    def test_markdown_fence_and_prose(self):
        llm = ResponseMockLLM(responses=['Sure! Here it is:\n```json\n{"text": "hi"}\n```\nAnything else?'])
        result, _ = chat_json(llm, "system", "user", Greeting)
        self.assertEqual(result.text, "hi")

    def test_no_json(self):
        llm = ResponseMockLLM(responses=["I can't help with that."])
        with self.assertLogs("codecraft.ai.llm_json", level="ERROR"):
            with self.assertRaises(LLMResponseFormatError):
                chat_json(llm, "system", "user", Greeting)

    def test_wrong_shape(self):
        llm = ResponseMockLLM(responses=['{"other": 1}'])
        with self.assertLogs("codecraft.ai.llm_json", level="ERROR"):
            with self.assertRaises(LLMResponseFormatError):
                chat_json(llm, "system", "user", Greeting)

    def test_llm_failure_is_not_a_format_error(self):
        llm = ResponseMockLLM(responses=["raise:service unavailable"])
        with self.assertRaises(MockLLMError):
            chat_json(llm, "system", "user", Greeting)

    def test_invalid_llm(self):
        with self.assertRaises(ValueError):
            chat_json("not an llm", "system", "user", Greeting)
