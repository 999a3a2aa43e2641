"""
Run an LLM call with fallback: if one LLM fails, try the next one.

All AI flows go through this class, so that the HTTP service can be configured
with a list of models in priority order.
"""
import time
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional
from llama_index.core.llms.llm import LLM
from codecraft.llm_factory import get_llm

logger = logging.getLogger(__name__)

class LLMExhaustedError(RuntimeError):
    """Every LLM was tried and every one of them failed."""
    def __init__(self, message: str, attempts: List['LLMAttempt']):
        super().__init__(message)
        self.attempts = attempts

class LLMModelBase:
    def create_llm(self) -> LLM:
        raise NotImplementedError("Subclasses must implement this method")

class LLMModelFromName(LLMModelBase):
    def __init__(self, name: str):
        self.name = name

    def create_llm(self) -> LLM:
        return get_llm(self.name)

    def __repr__(self) -> str:
        return f"LLMModelFromName(name='{self.name}')"

    @classmethod
    def from_names(cls, names: list[str]) -> list['LLMModelBase']:
        return [cls(name) for name in names]

class LLMModelWithInstance(LLMModelBase):
    def __init__(self, llm: LLM):
        self.llm = llm

    def create_llm(self) -> LLM:
        return self.llm

    def __repr__(self) -> str:
        return f"LLMModelWithInstance(llm={self.llm.__class__.__name__})"

    @classmethod
    def from_instances(cls, llms: list[LLM]) -> list['LLMModelBase']:
        return [cls(llm) for llm in llms]

@dataclass
class LLMAttempt:
    """Outcome of invoking one LLM. ``stage`` is "create" or "execute"."""
    stage: str
    llm_model: LLMModelBase
    success: bool
    duration: float
    result: Optional[Any] = None
    exception: Optional[Exception] = None

class LLMExecutor:
    def __init__(self, llm_models: list[LLMModelBase]):
        if not llm_models:
            raise ValueError("No LLMs provided")
        self.llm_models = llm_models
        self.attempts: List[LLMAttempt] = []

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)

    def run(self, execute_function: Callable[[LLM], Any]) -> Any:
        if not callable(execute_function):
            raise TypeError("execute_function must be a function that takes a LLM parameter")

        self.attempts = []
        for llm_model in self.llm_models:
            attempt = self._try_one_attempt(llm_model, execute_function)
            self.attempts.append(attempt)
            if attempt.success:
                return attempt.result

        self._raise_final_exception()

    def _try_one_attempt(self, llm_model: LLMModelBase, execute_function: Callable[[LLM], Any]) -> LLMAttempt:
        start_time = time.perf_counter()
        try:
            llm = llm_model.create_llm()
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(f"Error creating LLM {llm_model!r}: {e}")
            return LLMAttempt(stage='create', llm_model=llm_model, success=False, duration=duration, exception=e)

        try:
            result = execute_function(llm)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(f"Error running with LLM {llm_model!r}: {e}")
            return LLMAttempt(stage='execute', llm_model=llm_model, success=False, duration=duration, exception=e)

        duration = time.perf_counter() - start_time
        logger.info(f"Successfully ran with LLM {llm_model!r}. Duration: {duration:.2f} seconds")
        return LLMAttempt(stage='execute', llm_model=llm_model, success=True, duration=duration, result=result)

    def _raise_final_exception(self) -> None:
        rows = []
        for attempt_index, attempt in enumerate(self.attempts):
            rows.append(f" - Attempt {attempt_index} with {attempt.llm_model!r} failed during '{attempt.stage}' stage: {attempt.exception!r}")
        error_summary = "\n".join(rows)
        raise LLMExhaustedError(f"Failed to run. Exhausted all LLMs. Failure summary:\n{error_summary}", list(self.attempts))
