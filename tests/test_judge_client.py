"""
Judge 클라이언트 계약 및 LLM 어댑터 테스트
"""
import asyncio
import json

import pytest
from langchain_core.runnables import RunnableLambda

from conftest import ScriptedJudge, make_result
from testbuddy.domain.judge import (
    ORACLE_FAILURE_MESSAGE,
    EvaluationCase,
    EvaluationRequest,
    OracleFailure,
    SubmissionStatus,
    parse_oracle_payload,
)
from testbuddy.domain.judge.adapters.llm import LLMJudgeClient, OracleCaseResult, OracleResponse


def make_request(outputs=("4", "9", "16")) -> EvaluationRequest:
    return EvaluationRequest(
        language="python",
        source_code="print(int(input()) ** 2)",
        cases=[EvaluationCase(stdin=str(i + 2), expected_output=out) for i, out in enumerate(outputs)],
    )


class StructuredFakeLLM:
    """with_structured_output만 지원하는 테스트용 LLM"""

    def __init__(self, payload=None, error=None, delay=0.0):
        self.payload = payload
        self.error = error
        self.delay = delay
        self.messages = []

    def with_structured_output(self, schema):
        async def _respond(messages):
            self.messages.append(messages)
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return self.payload

        return RunnableLambda(_respond)


def oracle_case(status="Accepted", stdout=""):
    return OracleCaseResult(
        status=status, stdout=stdout, stderr="", compile_output="", time="0.01s", memory=512
    )


class TestJudgeClientContract:
    """JudgeClient.evaluate 공통 계약"""

    @pytest.mark.asyncio
    async def test_empty_request_skips_oracle(self, problem):
        judge = ScriptedJudge()
        batch = await judge.evaluate(make_request(outputs=()), problem)

        assert batch.results == []
        assert not batch.oracle_failed
        assert judge.requests == []

    @pytest.mark.asyncio
    async def test_results_keep_request_order(self, problem):
        judge = ScriptedJudge(
            outcomes=[
                make_result(SubmissionStatus.ACCEPTED, stdout="4"),
                make_result(SubmissionStatus.WRONG_ANSWER, stdout="8"),
                make_result(SubmissionStatus.RUNTIME_ERROR, stderr="boom"),
            ]
        )
        batch = await judge.evaluate(make_request(), problem)

        assert [r.status for r in batch.results] == [
            SubmissionStatus.ACCEPTED,
            SubmissionStatus.WRONG_ANSWER,
            SubmissionStatus.RUNTIME_ERROR,
        ]
        assert [r.expected_output for r in batch.results] == ["4", "9", "16"]

    @pytest.mark.asyncio
    async def test_length_mismatch_becomes_synthetic_failure(self, problem):
        judge = ScriptedJudge(outcomes=[make_result(), make_result()])
        batch = await judge.evaluate(make_request(), problem)

        assert batch.oracle_failed
        assert len(batch.results) == 3
        for result in batch.results:
            assert result.status == SubmissionStatus.COMPILATION_ERROR
            assert result.compile_output == ORACLE_FAILURE_MESSAGE
            assert result.stdout == "" and result.stderr == ""
            assert result.time == "0" and result.memory == 0

    @pytest.mark.asyncio
    async def test_adapter_exception_becomes_synthetic_failure(self, problem):
        judge = ScriptedJudge(error=RuntimeError("oracle down"))
        batch = await judge.evaluate(make_request(), problem)

        assert batch.oracle_error == "oracle down"
        assert [r.status for r in batch.results] == [SubmissionStatus.COMPILATION_ERROR] * 3
        assert [r.expected_output for r in batch.results] == ["4", "9", "16"]

    @pytest.mark.asyncio
    async def test_timeout_becomes_synthetic_failure(self, problem):
        judge = ScriptedJudge(gate=asyncio.Event(), timeout=0.05)
        batch = await judge.evaluate(make_request(), problem)

        assert batch.oracle_failed
        assert batch.results[0].compile_output == "Evaluation timed out after 0.05s."


class TestParseOraclePayload:
    def test_accepts_json_string(self):
        payload = json.dumps({"results": [{"status": "Accepted", "stdout": "4"}]})
        results = parse_oracle_payload(payload, 1)
        assert results[0].status == SubmissionStatus.ACCEPTED
        assert results[0].stdout == "4"

    def test_accepts_bare_list_and_null_fields(self):
        results = parse_oracle_payload(
            [{"status": "Wrong Answer", "stdout": None, "stderr": None, "time": 0.2}], 1
        )
        assert results[0].stdout == ""
        assert results[0].time == "0.2"

    def test_missing_results_array(self):
        with pytest.raises(OracleFailure):
            parse_oracle_payload({"verdict": "ok"}, 1)

    def test_invalid_json(self):
        with pytest.raises(OracleFailure):
            parse_oracle_payload("not json", 1)

    def test_non_verdict_status_rejected(self):
        with pytest.raises(OracleFailure):
            parse_oracle_payload({"results": [{"status": "Pending"}]}, 1)

    def test_missing_status_rejected(self):
        with pytest.raises(OracleFailure):
            parse_oracle_payload({"results": [{"stdout": "4"}]}, 1)

    def test_length_mismatch(self):
        with pytest.raises(OracleFailure):
            parse_oracle_payload({"results": []}, 2)


class TestLLMJudgeClient:
    @pytest.mark.asyncio
    async def test_structured_response(self, problem):
        llm = StructuredFakeLLM(
            payload=OracleResponse(
                results=[oracle_case(stdout="4"), oracle_case(stdout="9"), oracle_case("Wrong Answer", "15")]
            )
        )
        judge = LLMJudgeClient(llm=llm, timeout=5)
        batch = await judge.evaluate(make_request(), problem)

        assert not batch.oracle_failed
        assert [r.status for r in batch.results] == [
            SubmissionStatus.ACCEPTED,
            SubmissionStatus.ACCEPTED,
            SubmissionStatus.WRONG_ANSWER,
        ]
        assert batch.results[2].stdout == "15"
        assert batch.results[2].expected_output == "16"

    @pytest.mark.asyncio
    async def test_prompt_contains_cases_and_code(self, problem):
        llm = StructuredFakeLLM(payload={"results": [oracle_case().model_dump()] * 3})
        judge = LLMJudgeClient(llm=llm, timeout=5)
        await judge.evaluate(make_request(), problem)

        prompt = llm.messages[0][0].content
        assert '"stdin": "2"' in prompt
        assert '"expectedOutput": "16"' in prompt
        assert "print(int(input()) ** 2)" in prompt
        assert problem.title in prompt

    @pytest.mark.asyncio
    async def test_short_response_is_oracle_failure(self, problem):
        llm = StructuredFakeLLM(payload=OracleResponse(results=[oracle_case()]))
        judge = LLMJudgeClient(llm=llm, timeout=5)
        batch = await judge.evaluate(make_request(), problem)

        assert batch.oracle_failed
        assert len(batch.results) == 3

    @pytest.mark.asyncio
    async def test_llm_error_is_oracle_failure(self, problem):
        llm = StructuredFakeLLM(error=ValueError("quota exceeded"))
        judge = LLMJudgeClient(llm=llm, timeout=5)
        batch = await judge.evaluate(make_request(), problem)

        assert batch.oracle_failed
        assert all(r.compile_output == ORACLE_FAILURE_MESSAGE for r in batch.results)

    @pytest.mark.asyncio
    async def test_slow_llm_times_out(self, problem):
        llm = StructuredFakeLLM(payload=OracleResponse(results=[]), delay=1.0)
        judge = LLMJudgeClient(llm=llm, timeout=0.05)
        batch = await judge.evaluate(make_request(), problem)

        assert batch.oracle_failed
        assert "timed out" in batch.results[0].compile_output
