"""
TLC Output Parser

Parses the tagged message stream TLC prints when run with `-tool`:

    @!@!@STARTMSG 2217:4 @!@!@
    1: <Initial predicate>
    /\\ x = 0
    @!@!@ENDMSG 2217 @!@!@

Every message is filed under its class and code; lines printed outside any
message are filed under class 0, code 0.
"""

import logging
import re
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..artifacts import TlaTrace
from ...errors import CheckerFailureError, InvalidOutputError

logger = logging.getLogger(__name__)

ParsedMessageStream = Dict[int, Dict[int, List[str]]]

START_RE = re.compile(r"^@!@!@STARTMSG (\d+):(\d+) @!@!@$")
END_RE = re.compile(r"^@!@!@ENDMSG (\d+) @!@!@$")
INITIAL_STATE_RE = re.compile(r"^\d+: <Initial predicate>")

OUTSIDE_MESSAGE = 0
ERROR_CLASS = 1
STATE_CLASS = 4
STATE_PRINT_CODE = 2217


def parse_message_stream(lines: List[str]) -> ParsedMessageStream:
    """
    Group TLC `-tool` output into messages.

    Args:
        lines: TLC stdout lines

    Returns:
        Mapping message class -> message code -> message bodies in order
    """
    stream: Dict[int, Dict[int, List[str]]] = defaultdict(lambda: defaultdict(list))
    open_message: Optional[tuple] = None
    body: List[str] = []

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.rstrip("\r\n")
        start = START_RE.match(line.strip())
        end = END_RE.match(line.strip())
        if start:
            if open_message is not None:
                raise InvalidOutputError(
                    f"line {line_number}: message {start.group(1)} started "
                    f"inside message {open_message[0]}")
            open_message = (int(start.group(1)), int(start.group(2)))
            body = []
        elif end:
            code = int(end.group(1))
            if open_message is None:
                raise InvalidOutputError(
                    f"line {line_number}: message {code} ended outside any message")
            if code != open_message[0]:
                raise InvalidOutputError(
                    f"line {line_number}: message {open_message[0]} ended with code {code}")
            msg_code, msg_class = open_message
            stream[msg_class][msg_code].append("\n".join(body))
            open_message = None
        elif open_message is not None:
            body.append(line)
        else:
            stream[OUTSIDE_MESSAGE][OUTSIDE_MESSAGE].append(line)

    if open_message is not None:
        raise InvalidOutputError(f"message {open_message[0]} is never ended")

    return {msg_class: dict(codes) for msg_class, codes in stream.items()}


def _format_errors(errors: Dict[int, List[str]], log_path: Union[str, Path]) -> str:
    lines = []
    for code, bodies in errors.items():
        text = " ".join(body.strip().replace("\n", " ") for body in bodies)
        lines.append(f"[{log_path}:{code}]: {text}")
    return "\n".join(lines)


def parse_traces(lines: List[str], log_path: Union[str, Path]) -> List[TlaTrace]:
    """
    Extract the traces TLC printed.

    Args:
        lines: TLC stdout lines
        log_path: Log file, quoted in error messages

    Returns:
        Traces in print order; empty when the checked property held
    """
    stream = parse_message_stream(lines)

    states = stream.get(STATE_CLASS, {}).get(STATE_PRINT_CODE, [])
    if states:
        traces: List[TlaTrace] = []
        trace: Optional[TlaTrace] = None
        for body in states:
            header, _, state = body.partition("\n")
            if INITIAL_STATE_RE.match(header):
                if trace is not None:
                    traces.append(trace)
                trace = TlaTrace()
            # states printed before any initial state belong to no trace
            if trace is not None:
                trace.add(state)
        if trace is not None:
            traces.append(trace)
        logger.debug(f"Parsed {len(traces)} trace(s) from TLC output")
        return traces

    errors = stream.get(ERROR_CLASS, {})
    if errors:
        raise CheckerFailureError("TLC", _format_errors(errors, log_path))

    return []
