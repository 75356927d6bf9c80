"""Transaction error classification.

Maps a Solana JSON-RPC ``TransactionError`` value onto the top-level
instruction that caused it, e.g. ``{"InstructionError": [1, {"Custom": 6001}]}``
becomes ``ProgramError(index=1, message="custom program error: 0x1771")``.
"""

from __future__ import annotations

import logging
from typing import Any

from .run_types import ProgramError

logger = logging.getLogger(__name__)

INSTRUCTION_ERROR_KEY = "InstructionError"

INSTRUCTION_ERROR_MESSAGES: dict[str, str] = {
    "GenericError": "generic instruction error",
    "InvalidArgument": "invalid program argument",
    "InvalidInstructionData": "invalid instruction data",
    "InvalidAccountData": "invalid account data for instruction",
    "AccountDataTooSmall": "account data too small for instruction",
    "InsufficientFunds": "insufficient funds for instruction",
    "IncorrectProgramId": "incorrect program id for instruction",
    "MissingRequiredSignature": "missing required signature for instruction",
    "AccountAlreadyInitialized": "instruction requires an uninitialized account",
    "UninitializedAccount": "instruction requires an initialized account",
    "UnbalancedInstruction": "sum of account balances before and after instruction do not match",
    "ModifiedProgramId": "instruction illegally modified the program id of an account",
    "ExternalAccountLamportSpend": "instruction spent from the balance of an account it does not own",
    "ExternalAccountDataModified": "instruction modified data of an account it does not own",
    "ReadonlyLamportChange": "instruction changed the balance of a read-only account",
    "ReadonlyDataModified": "instruction modified data of a read-only account",
    "DuplicateAccountIndex": "instruction contains duplicate accounts",
    "ExecutableModified": "instruction changed executable bit of an account",
    "RentEpochModified": "instruction modified rent epoch of an account",
    "NotEnoughAccountKeys": "insufficient account keys for instruction",
    "AccountDataSizeChanged": "program other than the account's owner changed the size of the account data",
    "AccountNotExecutable": "instruction expected an executable account",
    "AccountBorrowFailed": "instruction tries to borrow reference for an account which is already borrowed",
    "AccountBorrowOutstanding": "instruction left account with an outstanding borrowed reference",
    "DuplicateAccountOutOfSync": "instruction modifications of multiply-passed account differ",
    "InvalidError": "program returned invalid error code",
    "ExecutableDataModified": "instruction changed executable accounts data",
    "ExecutableLamportChange": "instruction changed the balance of an executable account",
    "ExecutableAccountNotRentExempt": "executable accounts must be rent exempt",
    "UnsupportedProgramId": "Unsupported program id",
    "CallDepth": "Cross-program invocation call depth too deep",
    "MissingAccount": "An account required by the instruction is missing",
    "ReentrancyNotAllowed": "Cross-program invocation reentrancy not allowed for this instruction",
    "MaxSeedLengthExceeded": "Length of the seed is too long for address generation",
    "InvalidSeeds": "Provided seeds do not result in a valid address",
    "InvalidRealloc": "Failed to reallocate account data",
    "ComputationalBudgetExceeded": "Computational budget exceeded",
    "PrivilegeEscalation": "Cross-program invocation with unauthorized signer or writable account",
    "ProgramEnvironmentSetupFailure": "Failed to create program execution environment",
    "ProgramFailedToComplete": "Program failed to complete",
    "ProgramFailedToCompile": "Program failed to compile",
    "Immutable": "Account is immutable",
    "IncorrectAuthority": "Incorrect authority provided",
    "AccountNotRentExempt": "An account does not have enough lamports to be rent-exempt",
    "InvalidAccountOwner": "Invalid account owner",
    "ArithmeticOverflow": "Program arithmetic overflowed",
    "UnsupportedSysvar": "Unsupported sysvar",
    "IllegalOwner": "Provided owner is not allowed",
    "MaxAccountsDataAllocationsExceeded": "Accounts data allocations exceeded the maximum allowed per transaction",
    "MaxAccountsExceeded": "Max accounts exceeded",
    "MaxInstructionTraceLengthExceeded": "Max instruction trace length exceeded",
    "BuiltinProgramsMustConsumeComputeUnits": "Builtin programs must consume compute units",
}


def instruction_error_message(error: Any) -> str:
    """Human-readable message for the inner value of an ``InstructionError``."""
    if isinstance(error, str):
        return INSTRUCTION_ERROR_MESSAGES.get(error, error)
    if isinstance(error, dict):
        if "Custom" in error and isinstance(error["Custom"], int):
            return f"custom program error: {error['Custom']:#x}"
        if "BorshIoError" in error:
            return f"Failed to serialize or deserialize account data: {error['BorshIoError']}"
        if len(error) == 1:
            (name,) = error
            return INSTRUCTION_ERROR_MESSAGES.get(name, name)
    return str(error)


def get_transaction_instruction_error(error: Any) -> ProgramError | None:
    """Attribute *error* to a top-level instruction.

    Returns None for a missing error or one that is not an ``InstructionError``
    (e.g. ``"AccountNotFound"``), since those do not belong to any instruction.
    """
    if not isinstance(error, dict) or INSTRUCTION_ERROR_KEY not in error:
        return None
    inner = error[INSTRUCTION_ERROR_KEY]
    if not isinstance(inner, (list, tuple)) or len(inner) != 2:
        logger.debug("Malformed InstructionError payload: %r", inner)
        return None
    index, instruction_error = inner
    if not isinstance(index, int) or isinstance(index, bool):
        logger.debug("InstructionError index is not an integer: %r", index)
        return None
    return ProgramError(index=index, message=instruction_error_message(instruction_error))
