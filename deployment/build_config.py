"""
Build Configuration
Solidity compiler version and optimizer settings
"""

import json
from dataclasses import dataclass
from typing import Dict

DEFAULT_BUILD_CONFIG_PATH = "config/build_config.json"


@dataclass(frozen=True)
class BuildConfig:
    """Compiler settings shared by every contract in the project"""

    solc_version: str = "0.8.19"
    optimizer_enabled: bool = True
    optimizer_runs: int = 200
    via_ir: bool = True
    artifacts_dir: str = "artifacts"

    @classmethod
    def from_file(cls, config_path: str = DEFAULT_BUILD_CONFIG_PATH) -> "BuildConfig":
        with open(config_path, 'r') as f:
            config = json.load(f)

        return cls.from_dict(config)

    @classmethod
    def from_dict(cls, config: Dict) -> "BuildConfig":
        solidity = config.get('solidity', {})
        settings = solidity.get('settings', {})
        optimizer = settings.get('optimizer', {})
        paths = config.get('paths', {})

        return cls(
            solc_version=solidity.get('version', cls.solc_version),
            optimizer_enabled=bool(optimizer.get('enabled', cls.optimizer_enabled)),
            optimizer_runs=int(optimizer.get('runs', cls.optimizer_runs)),
            via_ir=bool(settings.get('viaIR', cls.via_ir)),
            artifacts_dir=paths.get('artifacts', cls.artifacts_dir),
        )

    def to_solc_settings(self) -> Dict:
        """
        Render the standard-JSON 'settings' block

        Returns:
            Settings dict for solcx.compile_standard
        """
        return {
            'optimizer': {
                'enabled': self.optimizer_enabled,
                'runs': self.optimizer_runs,
            },
            'viaIR': self.via_ir,
            'outputSelection': {
                '*': {
                    '*': ['abi', 'evm.bytecode.object', 'evm.deployedBytecode.object']
                }
            },
        }
