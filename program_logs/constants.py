"""Named constants — log markers, patterns and known program ids."""

from __future__ import annotations

PROGRAM_LOG_PREFIX = "Program log:"
PROGRAM_DATA_PREFIX = "Program data: "
LOG_TRUNCATED_PREFIX = "Log truncated"

SUCCESS_MARKER = "success"
FAILED_MARKER = "failed"

PROGRAM_LOG_PATTERN = r"Program log: (.*)"
INVOKE_PATTERN = r"Program (\w*) invoke \[(\d+)\]"
CONSUMED_PATTERN = r"Program \w* consumed (\d+) (.*)"

PROGRAM_LOGGED_TEMPLATE = 'Program logged: "{message}"'
PROGRAM_INVOKED_TEMPLATE = "Program invoked: {name}"
PROGRAM_CONSUMED_TEMPLATE = "Program consumed: {units} {rest}"
PROGRAM_RETURNED_SUCCESS = "Program returned success"
PROGRAM_RETURNED_ERROR_TEMPLATE = 'Program returned error: "{message}"'
RUNTIME_ERROR_TEMPLATE = "Runtime error: {message}"

PREFIX_INDENT = "\u00a0\u00a0"
PREFIX_MARKER = "> "

DISCRIMINATOR_LENGTH = 8

MANIFEST_PROGRAM_ID = "MNFSTqtC93rEfYHB6hF82sKdZpUDFWkViLByLd1k1Ms"
MANIFEST_FILL_LOG_DISCRIMINATOR = bytes([58, 230, 242, 3, 75, 113, 4, 169])
MANIFEST_FILL_LOG_TITLE = "MFX Fill Log: \n"
