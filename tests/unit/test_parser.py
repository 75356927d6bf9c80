"""Tests for parse_program_logs — grouping runtime logs by instruction."""

import logging

from program_logs import constants
from program_logs.cluster import Cluster
from program_logs.decoders import DecoderRegistry
from program_logs.log_types import InstructionLogs, LogMessage, LogStyle
from program_logs.parser import InvocationStack, build_prefix, parse_program_logs
from program_logs.program_names import MappingNameResolver

PROGRAM_A = "AAAAprogram1111111111111111111111111111111"
PROGRAM_B = "BBBBprogram1111111111111111111111111111111"


def _texts(trace: InstructionLogs) -> list[str]:
    return [log.text for log in trace.logs]


def _parse(logs, error=None, **kwargs):
    """Helper: parse with an empty decoder registry unless one is given."""
    kwargs.setdefault("decoders", DecoderRegistry())
    return parse_program_logs(logs, error, Cluster.MAINNET_BETA, **kwargs)


class TestBuildPrefix:
    def test_top_level_has_no_indent(self):
        assert build_prefix(1) == "> "

    def test_nested_level_indents_per_level(self):
        assert build_prefix(3) == constants.PREFIX_INDENT * 2 + "> "

    def test_indent_is_no_break_spaces(self):
        assert build_prefix(2) == "\u00a0\u00a0> "

    def test_zero_level_falls_back_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="program_logs.parser"):
            assert build_prefix(0) == "> "
        assert "indent level 0" in caplog.text

    def test_negative_level_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="program_logs.parser"):
            assert build_prefix(-2) == "> "


class TestInvocationStack:
    def test_push_pop_order(self):
        stack = InvocationStack()
        stack.push(PROGRAM_A)
        stack.push(PROGRAM_B)
        assert stack.top == PROGRAM_B
        assert stack.pop() == PROGRAM_B
        assert stack.top == PROGRAM_A
        assert len(stack) == 1

    def test_pop_empty_returns_none(self):
        stack = InvocationStack()
        assert stack.pop() is None
        assert stack.top is None
        assert len(stack) == 0


class TestUnannouncedLogs:
    def test_plain_lines_form_one_synthesized_instruction(self):
        logs = ["Upgraded program X", "some native output", "another line"]

        traces = _parse(logs)

        assert len(traces) == 1
        trace = traces[0]
        assert trace.invoked_program is None
        assert trace.compute_units == 0
        assert _texts(trace) == logs
        assert all(log.style == LogStyle.MUTED for log in trace.logs)
        assert all(log.prefix == "> " for log in trace.logs)

    def test_consumed_before_invoke_is_counted(self):
        traces = _parse(["Program Vote111 consumed 2100 of 200000 compute units"])

        assert len(traces) == 1
        assert traces[0].invoked_program is None
        assert traces[0].compute_units == 2100
        assert _texts(traces[0]) == ["Program consumed: 2100 of 200000 compute units"]

    def test_empty_logs_without_error(self):
        assert _parse([]) == []


class TestProgramLog:
    def test_rewritten_to_passive_tense(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                "Program log: Instruction: Transfer",
                f"Program {PROGRAM_A} success",
            ]
        )

        assert traces[0].logs[0] == LogMessage(
            text='Program logged: "Instruction: Transfer"',
            prefix="> ",
            style=LogStyle.MUTED,
        )

    def test_message_content_is_preserved(self):
        message = "amount=42, memo: hello: world"

        traces = _parse([f"Program {PROGRAM_A} invoke [1]", f"Program log: {message}"])

        assert message in traces[0].logs[0].text

    def test_program_log_without_any_instruction_is_kept(self):
        traces = _parse(["Program log: early"])

        assert len(traces) == 1
        assert _texts(traces[0]) == ['Program logged: "early"']


class TestInvokeAndReturn:
    def test_single_successful_instruction(self):
        traces = _parse([f"Program {PROGRAM_A} invoke [1]", f"Program {PROGRAM_A} success"])

        assert len(traces) == 1
        trace = traces[0]
        assert trace.invoked_program == PROGRAM_A
        assert trace.failed is False
        assert trace.logs == [
            LogMessage(text="Program returned success", prefix="> ", style=LogStyle.SUCCESS)
        ]

    def test_failed_instruction(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                f"Program {PROGRAM_A} consumed 100 of 200000 compute units",
                f"Program {PROGRAM_A} failed: custom program error: 0x1",
            ]
        )

        trace = traces[0]
        assert trace.failed is True
        assert trace.compute_units == 100
        last = trace.logs[-1]
        assert last.text.startswith("Program returned error:")
        assert last.text == 'Program returned error: "custom program error: 0x1"'
        assert last.style == LogStyle.WARNING
        assert last.prefix == "> "

    def test_one_trace_per_top_level_instruction(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                f"Program {PROGRAM_A} success",
                f"Program {PROGRAM_B} invoke [1]",
                f"Program {PROGRAM_B} success",
            ]
        )

        assert [t.invoked_program for t in traces] == [PROGRAM_A, PROGRAM_B]

    def test_nested_invoke_logs_into_parent(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                f"Program {PROGRAM_B} invoke [2]",
                f"Program {PROGRAM_B} success",
                f"Program {PROGRAM_A} success",
            ]
        )

        assert len(traces) == 1
        logs = traces[0].logs
        assert logs[0] == LogMessage(
            text=f"Program invoked: {PROGRAM_B}", prefix="> ", style=LogStyle.INFO
        )
        assert [(log.text, log.prefix) for log in logs[1:]] == [
            ("Program returned success", constants.PREFIX_INDENT + "> "),
            ("Program returned success", "> "),
        ]

    def test_nested_invoke_uses_name_resolver(self):
        resolver = MappingNameResolver({PROGRAM_B: "Token Program"})

        traces = _parse(
            [f"Program {PROGRAM_A} invoke [1]", f"Program {PROGRAM_B} invoke [2]"],
            name_resolver=resolver,
        )

        assert _texts(traces[0]) == ["Program invoked: Token Program"]

    def test_inner_lines_are_indented(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                f"Program {PROGRAM_B} invoke [2]",
                "Program log: inner",
            ]
        )

        assert traces[0].logs[-1].prefix == constants.PREFIX_INDENT + "> "

    def test_success_without_instruction_is_kept(self):
        traces = _parse([f"Program {PROGRAM_A} success"])

        assert len(traces) == 1
        assert traces[0].logs[0].style == LogStyle.SUCCESS


class TestComputeUnits:
    def test_nested_consumption_not_double_counted(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                f"Program {PROGRAM_B} invoke [2]",
                f"Program {PROGRAM_B} consumed 500 of 190000 compute units",
                f"Program {PROGRAM_B} success",
                f"Program {PROGRAM_A} consumed 1200 of 200000 compute units",
                f"Program {PROGRAM_A} success",
            ]
        )

        assert traces[0].compute_units == 1200

    def test_depth_two_consumption_alone_is_ignored(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                f"Program {PROGRAM_B} invoke [2]",
                f"Program {PROGRAM_B} consumed 500 of 190000 compute units",
            ]
        )

        assert traces[0].compute_units == 0
        assert traces[0].logs[-1].text == "Program consumed: 500 of 190000 compute units"

    def test_consumption_is_per_instruction(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                f"Program {PROGRAM_A} consumed 300 of 200000 compute units",
                f"Program {PROGRAM_A} success",
                f"Program {PROGRAM_B} invoke [1]",
                f"Program {PROGRAM_B} consumed 700 of 199700 compute units",
                f"Program {PROGRAM_B} success",
            ]
        )

        assert [t.compute_units for t in traces] == [300, 700]


class TestTruncation:
    def test_truncation_marks_without_adding_a_line(self):
        logs = [f"Program {PROGRAM_A} invoke [1]", "Program log: one"]
        before = _parse(logs)[0]

        after = _parse(logs + ["Log truncated"])[0]

        assert before.truncated is False
        assert after.truncated is True
        assert len(after.logs) == len(before.logs)


class TestVerificationFailure:
    """A bare ``failed ...`` line arrives after the program's depth was closed."""

    LOGS = [
        f"Program {PROGRAM_A} invoke [1]",
        f"Program {PROGRAM_A} consumed 10 of 200000 compute units",
        f"Program {PROGRAM_A} success",
        "failed to verify account AAAA: instruction modified data of a read-only account",
    ]

    def test_message_is_sentence_cased_full_line(self):
        trace = _parse(self.LOGS)[0]

        assert trace.failed is True
        assert trace.logs[-1].text == (
            "Failed to verify account AAAA: instruction modified data of a read-only account"
        )
        assert trace.logs[-1].style == LogStyle.WARNING

    def test_depth_is_bumped_back_to_the_instruction(self, caplog):
        with caplog.at_level(logging.WARNING, logger="program_logs.parser"):
            trace = _parse(self.LOGS)[0]

        assert trace.logs[-1].prefix == "> "
        assert "indent level" not in caplog.text

    def test_following_instruction_opens_new_trace(self):
        traces = _parse(self.LOGS + [f"Program {PROGRAM_B} invoke [1]"])

        assert len(traces) == 2
        assert traces[1].invoked_program == PROGRAM_B


class TestErrorAttribution:
    def test_error_without_logs_synthesizes_failed_instruction(self):
        traces = _parse([], {"InstructionError": [0, "GenericError"]})

        assert len(traces) == 1
        assert traces[0].failed is True
        assert traces[0].invoked_program is None
        assert traces[0].logs == []

    def test_runtime_error_appended_to_last_instruction(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                f"Program {PROGRAM_A} success",
                f"Program {PROGRAM_B} invoke [1]",
            ],
            {"InstructionError": [1, {"Custom": 6001}]},
        )

        assert traces[0].failed is False
        assert traces[1].failed is True
        assert traces[1].logs[-1] == LogMessage(
            text="Runtime error: custom program error: 0x1771",
            prefix="> ",
            style=LogStyle.WARNING,
        )

    def test_already_failed_instruction_not_duplicated(self):
        logs = [
            f"Program {PROGRAM_A} invoke [1]",
            f"Program {PROGRAM_A} failed: custom program error: 0x1",
        ]

        traces = _parse(logs, {"InstructionError": [0, {"Custom": 1}]})

        assert len(traces[0].logs) == 1
        assert not any(text.startswith("Runtime error") for text in _texts(traces[0]))

    def test_out_of_range_index_is_ignored(self):
        traces = _parse(
            [f"Program {PROGRAM_A} invoke [1]", f"Program {PROGRAM_A} success"],
            {"InstructionError": [5, "GenericError"]},
        )

        assert len(traces) == 1
        assert traces[0].failed is False

    def test_index_before_last_is_ignored(self):
        traces = _parse(
            [
                f"Program {PROGRAM_A} invoke [1]",
                f"Program {PROGRAM_A} success",
                f"Program {PROGRAM_B} invoke [1]",
                f"Program {PROGRAM_B} success",
            ],
            {"InstructionError": [0, "GenericError"]},
        )

        assert [t.failed for t in traces] == [False, False]

    def test_non_instruction_error_does_not_synthesize(self):
        assert _parse([], "AccountNotFound") == []

    def test_custom_classifier(self):
        from program_logs.run_types import ProgramError

        traces = _parse(
            [f"Program {PROGRAM_A} invoke [1]"],
            "anything",
            classify_error=lambda err: ProgramError(index=0, message="boom"),
        )

        assert traces[0].logs[-1].text == "Runtime error: boom"


class TestIsolation:
    def test_repeated_calls_do_not_share_state(self):
        logs = [f"Program {PROGRAM_A} invoke [1]", "Program log: x"]

        first = _parse(logs)
        second = _parse(logs)

        first[0].logs.append(LogMessage(text="extra", prefix="> ", style=LogStyle.MUTED))
        assert len(second[0].logs) == 1
