import unittest
from llama_index.core.llms.llm import LLM
from codecraft.ai.llm_executor import LLMExecutor, LLMExhaustedError, LLMModelBase, LLMModelWithInstance
from codecraft.llm_util.response_mockllm import ResponseMockLLM

class TestLLMExecutor(unittest.TestCase):
    def test_simple(self):
        # Arrange
        llm = ResponseMockLLM(
            responses=["Hello, world!"],
        )
        llm_model = LLMModelWithInstance(llm)
        executor = LLMExecutor(llm_models=[llm_model])

        def execute_function(llm: LLM) -> str:
            return llm.complete("Hi").text

        # Act
        result = executor.run(execute_function)

        # Assert
        self.assertEqual(result, "Hello, world!")
        self.assertEqual(executor.attempt_count, 1)

    def test_fallback_to_the_2nd_llm(self):
        # Arrange
        bad_llm = ResponseMockLLM(responses=["raise:BAD"])
        good_llm = ResponseMockLLM(responses=["I'm the 2nd LLM"])
        executor = LLMExecutor(llm_models=LLMModelWithInstance.from_instances([bad_llm, good_llm]))

        def execute_function(llm: LLM) -> str:
            return llm.complete("Hi").text

        # Act
        with self.assertLogs("codecraft.ai.llm_executor", level="ERROR"):
            result = executor.run(execute_function)

        # Assert
        self.assertEqual(result, "I'm the 2nd LLM")
        self.assertEqual(executor.attempt_count, 2)
        self.assertFalse(executor.attempts[0].success)
        self.assertTrue(executor.attempts[1].success)

    def test_exhaust_all_llms(self):
        # Arrange
        llms = [ResponseMockLLM(responses=["raise:BAD1"]), ResponseMockLLM(responses=["raise:BAD2"])]
        executor = LLMExecutor(llm_models=LLMModelWithInstance.from_instances(llms))

        def execute_function(llm: LLM) -> str:
            return llm.complete("Hi").text

        # Act
        with self.assertLogs("codecraft.ai.llm_executor", level="ERROR"):
            with self.assertRaises(LLMExhaustedError) as context:
                executor.run(execute_function)

        # Assert
        message = str(context.exception)
        self.assertIn("Exhausted all LLMs", message)
        self.assertIn("BAD1", message)
        self.assertIn("BAD2", message)
        self.assertEqual(len(context.exception.attempts), 2)

    def test_failure_inside_create_llm(self):
        # Arrange
        class BadLLMModel(LLMModelBase):
            def create_llm(self) -> LLM:
                raise ValueError("Cannot initialize this model")
            def __repr__(self) -> str:
                return "BadLLMModel()"

        executor = LLMExecutor(llm_models=[BadLLMModel()])

        # Act
        with self.assertLogs("codecraft.ai.llm_executor", level="ERROR"):
            with self.assertRaises(LLMExhaustedError) as context:
                executor.run(lambda llm: llm.complete("Hi").text)

        # Assert
        self.assertEqual(context.exception.attempts[0].stage, "create")
        self.assertIn("Cannot initialize this model", str(context.exception))

    def test_no_llms(self):
        with self.assertRaises(ValueError):
            LLMExecutor(llm_models=[])

    def test_execute_function_must_be_callable(self):
        executor = LLMExecutor(llm_models=LLMModelWithInstance.from_instances([ResponseMockLLM(responses=["x"])]))
        with self.assertRaises(TypeError):
            executor.run("not a function")
