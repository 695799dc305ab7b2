"""
Solidity Compiler
Delegates compilation to solc through py-solc-x
"""

import os
import json
from typing import Optional
import solcx
from solcx.exceptions import SolcError, SolcInstallationError, SolcNotInstalled
from loguru import logger

from .build_config import BuildConfig
from .contract_registry import ContractArtifact, ContractSpec
from .errors import CompilationFailed


class SolidityCompiler:
    """
    Compiles registered contracts with the configured solc version
    """

    def __init__(self, build_config: BuildConfig, project_root: str = "."):
        """
        Initialize Solidity Compiler

        Args:
            build_config: Compiler version and optimizer settings
            project_root: Directory that source paths are relative to
        """
        self.build_config = build_config
        self.project_root = project_root

    def ensure_solc(self):
        """Install the configured solc version if it is missing"""
        version = self.build_config.solc_version

        installed = [str(v) for v in solcx.get_installed_solc_versions()]
        if version in installed:
            return

        logger.info(f"Installing solc {version}...")
        try:
            solcx.install_solc(version)
        except (SolcInstallationError, OSError) as e:
            raise CompilationFailed(f"Could not install solc {version}: {e}") from e

    def compile(self, spec: ContractSpec) -> ContractArtifact:
        """
        Compile one contract

        Args:
            spec: Registered contract

        Returns:
            ContractArtifact

        Raises:
            CompilationFailed: source missing or solc reported errors
        """
        source_path = os.path.join(self.project_root, spec.source)

        if not os.path.exists(source_path):
            raise CompilationFailed(f"Source not found: {source_path}")

        with open(source_path, 'r') as f:
            source = f.read()

        self.ensure_solc()

        logger.info(
            f"Compiling {spec.qualified_name} with solc {self.build_config.solc_version} "
            f"(optimizer runs: {self.build_config.optimizer_runs}, viaIR: {self.build_config.via_ir})"
        )

        try:
            output = solcx.compile_standard(
                {
                    'language': 'Solidity',
                    'sources': {spec.source: {'content': source}},
                    'settings': self.build_config.to_solc_settings(),
                },
                solc_version=self.build_config.solc_version,
                base_path=self.project_root,
                allow_paths=[self.project_root],
            )
        except (SolcError, SolcNotInstalled) as e:
            raise CompilationFailed(str(e)) from e

        errors = [
            err for err in output.get('errors', [])
            if err.get('severity') == 'error'
        ]
        if errors:
            raise CompilationFailed(
                "\n".join(err.get('formattedMessage', err.get('message', '')) for err in errors)
            )

        try:
            contract = output['contracts'][spec.source][spec.name]
        except KeyError:
            raise CompilationFailed(
                f"solc produced no output for {spec.qualified_name}"
            ) from None

        return ContractArtifact(
            contract_name=spec.name,
            source_name=spec.source,
            abi=contract['abi'],
            bytecode='0x' + contract['evm']['bytecode']['object'],
            deployed_bytecode='0x' + contract['evm'].get('deployedBytecode', {}).get('object', ''),
        )

    def write_artifact(self, artifact: ContractArtifact, artifacts_dir: Optional[str] = None) -> str:
        """
        Persist an artifact in Hardhat layout

        Returns:
            Path of the written file
        """
        artifacts_dir = artifacts_dir or self.build_config.artifacts_dir
        path = os.path.join(artifacts_dir, artifact.source_name, f"{artifact.contract_name}.json")

        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w') as f:
            json.dump(artifact.to_hardhat_json(), f, indent=2)

        logger.debug(f"Artifact written: {path}")
        return path
