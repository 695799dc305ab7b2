"""
Contract Registry
Typed mapping from contract identifier to compiled ABI/bytecode
"""

import os
import json
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from loguru import logger

from .build_config import BuildConfig
from .errors import InvalidArtifact

HARDHAT_ARTIFACT_FORMAT = "hh-sol-artifact-1"


@dataclass(frozen=True)
class ContractSpec:
    """Static description of a deployable contract"""

    name: str
    source: str
    constructor_inputs: Tuple[str, ...] = ()

    @property
    def qualified_name(self) -> str:
        return f"{self.source}:{self.name}"

    def artifact_path(self, artifacts_dir: str) -> str:
        # Hardhat layout: artifacts/<source path>/<ContractName>.json
        return os.path.join(artifacts_dir, self.source, f"{self.name}.json")


@dataclass(frozen=True)
class ContractArtifact:
    """Compiled contract ready for deployment"""

    contract_name: str
    source_name: str
    abi: List[Dict]
    bytecode: str
    deployed_bytecode: str = "0x"

    @property
    def constructor_inputs(self) -> Tuple[str, ...]:
        for entry in self.abi:
            if entry.get('type') == 'constructor':
                return tuple(item['type'] for item in entry.get('inputs', []))
        return ()

    def to_hardhat_json(self) -> Dict:
        return {
            '_format': HARDHAT_ARTIFACT_FORMAT,
            'contractName': self.contract_name,
            'sourceName': self.source_name,
            'abi': self.abi,
            'bytecode': self.bytecode,
            'deployedBytecode': self.deployed_bytecode,
            'linkReferences': {},
            'deployedLinkReferences': {},
        }


PET_RACE = ContractSpec(
    name="PetRace",
    source="contracts/PetRace.sol",
    constructor_inputs=("address",),
)

CONTRACTS: Dict[str, ContractSpec] = {
    PET_RACE.name: PET_RACE,
}


def get_contract_spec(contract_id: str) -> ContractSpec:
    """
    Look up a contract by name or qualified name

    Args:
        contract_id: 'PetRace' or 'contracts/PetRace.sol:PetRace'

    Returns:
        ContractSpec
    """
    if contract_id in CONTRACTS:
        return CONTRACTS[contract_id]

    for spec in CONTRACTS.values():
        if spec.qualified_name == contract_id:
            return spec

    raise InvalidArtifact(
        f"Contract {contract_id!r} is not registered (known: {', '.join(sorted(CONTRACTS))})"
    )


def load_artifact_file(path: str) -> ContractArtifact:
    """Read a Hardhat-format artifact JSON file"""
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidArtifact(f"Cannot read artifact {path}: {e}") from e

    bytecode = data.get('bytecode')
    # Foundry nests the hex under 'object'
    if isinstance(bytecode, dict):
        bytecode = bytecode.get('object')

    if not data.get('abi') or not bytecode or bytecode in ('0x', ''):
        raise InvalidArtifact(f"Artifact {path} has no ABI or bytecode")

    if not bytecode.startswith('0x'):
        bytecode = '0x' + bytecode

    deployed = data.get('deployedBytecode', '0x')
    if isinstance(deployed, dict):
        deployed = deployed.get('object', '0x')

    return ContractArtifact(
        contract_name=data.get('contractName', os.path.splitext(os.path.basename(path))[0]),
        source_name=data.get('sourceName', ''),
        abi=data['abi'],
        bytecode=bytecode,
        deployed_bytecode=deployed or '0x',
    )


class ContractRegistry:
    """
    Resolves registered contracts to validated artifacts

    Prebuilt artifacts are preferred; the compiler is only invoked when the
    artifact file does not exist.
    """

    def __init__(
        self,
        build_config: Optional[BuildConfig] = None,
        compiler=None,
        artifacts_dir: Optional[str] = None
    ):
        """
        Initialize Contract Registry

        Args:
            build_config: Build configuration (paths + compiler settings)
            compiler: SolidityCompiler used when no artifact exists
            artifacts_dir: Override for the artifacts directory
        """
        self.build_config = build_config or BuildConfig()
        self.compiler = compiler
        self.artifacts_dir = artifacts_dir or self.build_config.artifacts_dir

    def get_artifact(self, contract_id: str) -> ContractArtifact:
        """
        Get the validated artifact for a contract

        Args:
            contract_id: Registered contract name or qualified name

        Returns:
            ContractArtifact

        Raises:
            CompilationFailed: compilation failed or artifact is invalid
        """
        spec = get_contract_spec(contract_id)
        path = spec.artifact_path(self.artifacts_dir)

        if os.path.exists(path):
            logger.debug(f"Using artifact {path}")
            artifact = load_artifact_file(path)
        elif self.compiler is not None:
            logger.info(f"No artifact for {spec.qualified_name}, compiling...")
            artifact = self.compiler.compile(spec)
            self.compiler.write_artifact(artifact, self.artifacts_dir)
        else:
            raise InvalidArtifact(
                f"Artifact not found: {path} (compile {spec.qualified_name} first)"
            )

        self._validate(spec, artifact)
        return artifact

    def _validate(self, spec: ContractSpec, artifact: ContractArtifact):
        """Artifact must match the registered constructor signature"""
        if artifact.contract_name != spec.name:
            raise InvalidArtifact(
                f"Artifact holds {artifact.contract_name}, expected {spec.name}"
            )

        if artifact.constructor_inputs != spec.constructor_inputs:
            raise InvalidArtifact(
                f"{spec.qualified_name} constructor takes "
                f"({', '.join(artifact.constructor_inputs)}), "
                f"expected ({', '.join(spec.constructor_inputs)})"
            )
