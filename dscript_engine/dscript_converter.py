"""
D-Script to Network Configuration Converter

Turns an already validated D-Script into the structured network
configuration consumed by the training simulator.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from dscript_parser.dscript_parser import (
    DEFAULT_LAYER_KEYWORD,
    SPECIAL_LAYER_KEYWORD,
    NetworkKind,
    tokenize_lines,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Data Classes
# ============================================================================

class LayerType(Enum):
    DEFAULT = "DEFAULT"
    SPECIAL = "SPECIAL"


@dataclass
class NetworkConfig:
    """Network described by a D-Script"""
    network_type: Optional[NetworkKind] = None
    layers: List[LayerType] = field(default_factory=list)

    @property
    def default_layer_count(self) -> int:
        return sum(1 for layer in self.layers if layer is LayerType.DEFAULT)

    @property
    def special_layer_count(self) -> int:
        return sum(1 for layer in self.layers if layer is LayerType.SPECIAL)

    @property
    def metrics_key(self) -> str:
        """Lookup key of the form <networkType>-<default>-<special>"""
        kind = self.network_type.value if self.network_type else "null"
        return f"{kind}-{self.default_layer_count}-{self.special_layer_count}"

    def to_dict(self):
        return {
            'networkType': self.network_type.value if self.network_type else None,
            'defaultLayerCount': self.default_layer_count,
            'specialLayerCount': self.special_layer_count,
        }


# ============================================================================
# D-Script Converter - Main Class
# ============================================================================

class DScriptConverter:
    """
    Converts D-Script text to a NetworkConfig.

    Callers validate first. The conversion trusts its input: an unknown
    network type leaves network_type unset and unknown lines are skipped,
    nothing is bounds-checked and nothing is raised.
    """

    def convert_file(self, filepath: str) -> NetworkConfig:
        """Convert a D-Script file"""
        with open(filepath, 'r') as f:
            return self.convert_text(f.read())

    def convert_text(self, text: str) -> NetworkConfig:
        return self.convert_lines(text.split('\n'))

    def convert_lines(self, lines: List[str]) -> NetworkConfig:
        """Convert a list of D-Script lines"""
        script = tokenize_lines('\n'.join(line.rstrip('\n') for line in lines))
        config = NetworkConfig()
        if not script:
            return config

        parts = script[0].text.split(' ')
        config.network_type = NetworkKind.from_token(parts[1] if len(parts) > 1 else None)

        for line in script[1:]:
            if line.text == DEFAULT_LAYER_KEYWORD:
                config.layers.append(LayerType.DEFAULT)
            elif line.text == SPECIAL_LAYER_KEYWORD:
                config.layers.append(LayerType.SPECIAL)

        logger.debug("Extracted %s", config.metrics_key)
        return config


def extract_config(script_text: str) -> NetworkConfig:
    """Extract the network configuration from validated D-Script text"""
    return DScriptConverter().convert_text(script_text)


# ============================================================================
# Example Usage
# ============================================================================

def main(argv=None) -> int:
    import argparse
    import json

    parser = argparse.ArgumentParser(description='Convert a D-Script file to its network configuration')
    parser.add_argument('file', help='D-Script file to convert')
    parser.add_argument('-j', '--json', action='store_true', help='Output the configuration as JSON')
    args = parser.parse_args(argv)

    config = DScriptConverter().convert_file(args.file)

    if args.json:
        output = config.to_dict()
        output['metricsKey'] = config.metrics_key
        print(json.dumps(output, indent=2))
        return 0

    print("\n=== Conversion Summary ===")
    print(f"Network type: {config.network_type.value if config.network_type else 'unset'}")
    print(f"Default layers: {config.default_layer_count}")
    print(f"Special layers: {config.special_layer_count}")
    print(f"Metrics key: {config.metrics_key}")
    return 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
