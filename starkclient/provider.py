"""Abstract interface of a StarkNet data provider."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .block import Block, BlockId
from .contract import ContractArtifact, ContractCode
from .field_element import FieldElement
from .requests import AddTransactionResult, InvokeFunctionTransactionRequest, TransactionRequest
from .responses import CallContractResult, ContractAddresses, FeeEstimate
from .state import StateUpdate
from .trace import TransactionTrace
from .transactions import TransactionInfo, TransactionReceipt, TransactionStatusInfo


class Provider(ABC):
    """Reads chain data from StarkNet and submits transactions to it."""

    @abstractmethod
    async def add_transaction(
        self, tx: TransactionRequest, token: Optional[str] = None
    ) -> AddTransactionResult:
        """Submit a deploy or invoke transaction."""

    @abstractmethod
    async def get_contract_addresses(self) -> ContractAddresses:
        """L1 addresses of the core StarkNet contracts."""

    @abstractmethod
    async def call_contract(
        self, invoke_tx: InvokeFunctionTransactionRequest, block_identifier: BlockId
    ) -> CallContractResult:
        """Run a function call without submitting a transaction."""

    @abstractmethod
    async def estimate_fee(
        self, invoke_tx: InvokeFunctionTransactionRequest, block_identifier: BlockId
    ) -> FeeEstimate:
        """Estimate the fee of an invoke transaction."""

    @abstractmethod
    async def get_block(self, block_identifier: BlockId) -> Block:
        """Fetch a block."""

    @abstractmethod
    async def get_state_update(self, block_identifier: BlockId) -> StateUpdate:
        """Fetch the state update of a block."""

    @abstractmethod
    async def get_code(
        self, contract_address: FieldElement, block_identifier: BlockId
    ) -> ContractCode:
        """Fetch the bytecode and ABI of a deployed contract."""

    @abstractmethod
    async def get_full_contract(
        self, contract_address: FieldElement, block_identifier: BlockId
    ) -> ContractArtifact:
        """Fetch the full artifact of a deployed contract."""

    @abstractmethod
    async def get_storage_at(
        self, contract_address: FieldElement, key: FieldElement, block_identifier: BlockId
    ) -> FieldElement:
        """Read one storage slot of a contract."""

    @abstractmethod
    async def get_transaction_status(
        self, transaction_hash: FieldElement
    ) -> TransactionStatusInfo:
        """Fetch the status of a transaction."""

    @abstractmethod
    async def get_transaction(self, transaction_hash: FieldElement) -> TransactionInfo:
        """Fetch a transaction."""

    @abstractmethod
    async def get_transaction_receipt(self, transaction_hash: FieldElement) -> TransactionReceipt:
        """Fetch the receipt of a transaction."""

    @abstractmethod
    async def get_transaction_trace(self, transaction_hash: FieldElement) -> TransactionTrace:
        """Fetch the execution trace of a transaction."""

    @abstractmethod
    async def get_block_hash_by_id(self, block_number: int) -> FieldElement:
        """Hash of the block with the given number."""

    @abstractmethod
    async def get_block_id_by_hash(self, block_hash: FieldElement) -> int:
        """Number of the block with the given hash."""

    @abstractmethod
    async def get_transaction_hash_by_id(self, transaction_number: int) -> FieldElement:
        """Hash of the transaction with the given number."""

    @abstractmethod
    async def get_transaction_id_by_hash(self, transaction_hash: FieldElement) -> int:
        """Number of the transaction with the given hash."""

    @abstractmethod
    async def get_last_batch_id(self) -> int:
        """Identifier of the last batch."""

    @abstractmethod
    async def get_l1_blockchain_id(self) -> int:
        """Identifier of the L1 chain."""