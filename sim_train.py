import logging
import os
import random
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import yaml

from dscript_engine.config import check_rounds, ConfigError
from dscript_engine.dscript_converter import NetworkConfig, extract_config
from dscript_parser.dscript_parser import NetworkKind, validate

# Simulated training for D-Script networks. Nothing is learned here:
# results come from a table of predefined metrics or are generated
# with a little noise so that more rounds look better.

logger = logging.getLogger(__name__)

DEFAULT_METRICS_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                                    'dscript_engine', 'metrics.yaml')

POOR, AVERAGE, GOOD = 70, 80, 90

VERDICTS = {
    NetworkKind.IRISSCANNING: (
        "Ooh! Not a good iris scanning model! Try adding more layers or training for more rounds!",
        "This iris scanning model is okay, but could be better with more specialized layers.",
        "Good job! This is a solid iris scanning model that can identify most iris patterns.",
        "Excellent iris scanning model! This could be used in real security systems!",
    ),
    NetworkKind.IMAGERECOG: (
        "Ooh! Not a good image recognition model! Try harder with different layer combinations!",
        "This image recognition model needs improvement. Try adding more special layers.",
        "Nice work! This image recognition model can identify most common objects.",
        "Outstanding image recognition model! This could compete with commercial systems!",
    ),
    NetworkKind.CLIMATEPRED: (
        "Ooh! Not a good climate prediction model! Weather forecasting is hard - try more layers!",
        "This climate prediction model is basic. It might predict obvious weather patterns.",
        "Good climate prediction model! It can forecast weather trends with decent accuracy.",
        "Excellent climate prediction model! This could help meteorologists make better forecasts!",
    ),
    None: (
        "This model needs significant improvement. Try a different architecture.",
        "This model performs adequately but has room for improvement.",
        "This is a good model with solid performance metrics.",
        "Excellent model! The performance metrics are very impressive.",
    ),
}


class MetricsTableError(Exception):
    pass


@dataclass
class TrainingResult:
    accuracy: float
    epochs: List[int]
    values: List[float]
    verdict: str
    metrics_key: str
    predefined: bool = False
    duration: float = 0.0


@dataclass
class PredefinedMetrics:
    accuracy: float
    values: List[float] = field(default_factory=list)


def generate_verdict(network_type: Optional[NetworkKind], accuracy: float) -> str:
    poor, average, good, excellent = VERDICTS[network_type]
    if accuracy < POOR:
        return poor
    elif accuracy < AVERAGE:
        return average
    elif accuracy < GOOD:
        return good
    return excellent


def training_time_range(rounds: int) -> Tuple[int, int]:
    """Simulated training time bounds in seconds"""
    if rounds <= 1:
        return 10, 20
    elif rounds <= 3:
        return 20, 40
    return 40, 50


def load_metrics_table(path: str = DEFAULT_METRICS_FILE) -> Dict[str, PredefinedMetrics]:
    """
    Load the predefined metrics table from YAML.
    Raises MetricsTableError when the file is missing or malformed.
    """
    try:
        with open(path, 'r') as file:
            data = yaml.safe_load(file)
    except FileNotFoundError:
        raise MetricsTableError(f"Metrics file not found: {path}\nCheck the path is correct.")
    except PermissionError:
        raise MetricsTableError(f"Cannot read {path}\nCheck file permissions.")
    except yaml.YAMLError as e:
        raise MetricsTableError(f"Invalid YAML syntax in {path}\nDetails: {e}")

    if not isinstance(data, dict):
        raise MetricsTableError(f"Metrics file {path} must map keys to metrics")

    table = {}
    for key, entry in data.items():
        try:
            table[str(key)] = PredefinedMetrics(
                accuracy=float(entry['accuracy']),
                values=[float(v) for v in entry.get('values', [])]
            )
        except (TypeError, KeyError, ValueError, AttributeError):
            raise MetricsTableError(f"Malformed metrics entry '{key}' in {path}\n"
                                    "Each entry needs an accuracy and a list of values.")
    logger.debug("Loaded %d predefined metrics entries from %s", len(table), path)
    return table


class TrainingSimulator:
    def __init__(self, metrics_file: Optional[str] = None, rng: Optional[random.Random] = None,
                 realtime: bool = False, sleep=time.sleep):
        self.metrics = load_metrics_table(metrics_file or DEFAULT_METRICS_FILE)
        self.rng = rng or random.Random()
        self.realtime = realtime
        self.sleep = sleep

    def train(self, config: NetworkConfig, rounds: int = 3) -> TrainingResult:
        """
        Produce metrics for a network config.
        Raises ConfigError if rounds is outside 1..5.
        """
        check_rounds(rounds)

        low, high = training_time_range(rounds)
        duration = self.rng.random() * (high - low) + low
        if self.realtime:
            logger.debug("Sleeping %.1fs to simulate training", duration)
            self.sleep(duration)

        epochs = list(range(1, rounds + 1))
        predefined = self.metrics.get(config.metrics_key)
        if predefined:
            accuracy = predefined.accuracy
            values = predefined.values[:rounds]
        else:
            accuracy, values = self._generate_values(rounds)

        logger.debug("Trained %s for %d round(s): accuracy %.1f (%s)", config.metrics_key,
                     rounds, accuracy, "predefined" if predefined else "generated")
        return TrainingResult(
            accuracy=accuracy,
            epochs=epochs,
            values=values,
            verdict=generate_verdict(config.network_type, accuracy),
            metrics_key=config.metrics_key,
            predefined=predefined is not None,
            duration=duration
        )

    def _generate_values(self, rounds: int) -> Tuple[float, List[float]]:
        base = 60 + self.rng.random() * 10
        top = base + rounds * 5 + self.rng.random() * 5
        step = (top - base) / (rounds - 1 or 1)

        values = []
        for i in range(rounds):
            if i == 0:
                values.append(base)
            elif i == rounds - 1:
                values.append(top)
            else:
                values.append(base + step * i + (self.rng.random() * 2 - 1))
        return top, values

    def run_script(self, script_text: str, rounds: int = 3):
        """
        Validate a D-Script and train the network it describes.
        Returns: (success: bool, result: TrainingResult or None, error: str or None)
        """
        # 1. Script validation
        validation = validate(script_text)
        if not validation.is_valid:
            details = '\n'.join(f"  - {e}" for e in validation.errors)
            return False, None, f"ERROR: Script is not valid\n{details}"

        # 2. Rounds
        try:
            check_rounds(rounds)
        except ConfigError as e:
            return False, None, f"ERROR: {e}"

        # 3. Train
        config = extract_config(script_text)
        return True, self.train(config, rounds), None


def format_result(result: TrainingResult) -> str:
    output = [f"\n=== Training: {result.metrics_key} ==="]
    output.append(f"Accuracy: {result.accuracy:.1f}%")
    output.append(f"Source: {'predefined' if result.predefined else 'generated'}")
    output.append(f"\nRounds ({len(result.epochs)}):")
    for epoch, value in zip(result.epochs, result.values):
        output.append(f"  Round {epoch}: {value:.1f}%")
    output.append(f"\nVerdict: {result.verdict}")
    return '\n'.join(output)
