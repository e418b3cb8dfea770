"""Deploying contracts from compiled artifacts."""

from __future__ import annotations

import gzip
import json
import secrets
from typing import Any, Iterable, Optional

from .contract import ContractArtifact
from .field_element import FieldElement
from .requests import AddTransactionResult, ContractDefinition, DeployTransactionRequest


class ContractFactoryError(Exception):
    """Raised when a contract program cannot be serialized or compressed."""


class ContractFactory:
    """Deploys instances of one compiled contract through a provider."""

    def __init__(self, artifact: ContractArtifact, provider: Any) -> None:
        try:
            program_json = json.dumps(
                artifact.program.to_json(), separators=(",", ":"), ensure_ascii=False
            )
        except (TypeError, ValueError) as err:
            raise ContractFactoryError(f"cannot serialize program: {err}") from err
        try:
            # Best compression level keeps the payload small.
            self._compressed_program = gzip.compress(
                program_json.encode("utf-8"), compresslevel=9, mtime=0
            )
        except OSError as err:
            raise ContractFactoryError(f"cannot compress program: {err}") from err
        self._entry_points_by_type = artifact.entry_points_by_type
        self._abi = tuple(artifact.abi)
        self._provider = provider

    @property
    def compressed_program(self) -> bytes:
        """The gzip-compressed JSON of the contract program."""
        return self._compressed_program

    async def deploy(
        self, constructor_calldata: Iterable[FieldElement], token: Optional[str] = None
    ) -> AddTransactionResult:
        """Submit a deploy transaction with a random salt."""
        # 31 random bytes keep the salt below the field modulus.
        salt = FieldElement.from_bytes_be(b"\x00" + secrets.token_bytes(31))
        request = DeployTransactionRequest(
            constructor_calldata=tuple(constructor_calldata),
            contract_address_salt=salt,
            contract_definition=ContractDefinition(
                program=self._compressed_program,
                entry_points_by_type=self._entry_points_by_type,
                abi=self._abi,
            ),
        )
        return await self._provider.add_transaction(request, token)