"""
Deployment Records
Writes a per-network manifest for networks with save_deployments enabled
"""

import os
import json
import time
from typing import List, Optional
from loguru import logger

DEFAULT_RECORDS_DIR = "deployments"


class DeploymentRecords:
    """
    Stores deployments as deployments/<network>/<ContractName>.json

    A new deployment of the same contract replaces the previous record.
    """

    def __init__(self, records_dir: str = DEFAULT_RECORDS_DIR):
        self.records_dir = records_dir

    def path_for(self, network: str, contract_name: str) -> str:
        return os.path.join(self.records_dir, network, f"{contract_name}.json")

    def save(self, result, artifact, constructor_args: List) -> str:
        """
        Write the record for a confirmed deployment

        Args:
            result: DeploymentResult
            artifact: ContractArtifact that was deployed
            constructor_args: Arguments passed to the constructor

        Returns:
            Path of the written record
        """
        path = self.path_for(result.network, artifact.contract_name)
        os.makedirs(os.path.dirname(path), exist_ok=True)

        record = {
            'address': result.contract_address,
            'transactionHash': result.transaction_hash,
            'blockNumber': result.block_number,
            'gasUsed': result.gas_used,
            'args': constructor_args,
            'contractName': artifact.contract_name,
            'sourceName': artifact.source_name,
            'abi': artifact.abi,
            'deployedAt': int(time.time()),
        }

        with open(path, 'w') as f:
            json.dump(record, f, indent=2)

        logger.success(f"Deployment record saved: {path}")
        return path

    def load(self, network: str, contract_name: str) -> Optional[dict]:
        """Read a saved record, or None if the contract was never recorded"""
        path = self.path_for(network, contract_name)

        if not os.path.exists(path):
            return None

        with open(path, 'r') as f:
            return json.load(f)
