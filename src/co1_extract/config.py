"""Configuration management for the CO1 extraction tool."""

import json
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from .rate_limiter import NCBI_RATE_WITH_KEY, NCBI_RATE_WITHOUT_KEY


@dataclass
class APIConfig:
    """NCBI API configuration settings."""
    ncbi_api_key: Optional[str] = None
    email: str = "user@example.com"
    retry_attempts: int = 3
    backoff_factor: float = 2.0
    rate_limit_per_second: float = NCBI_RATE_WITHOUT_KEY

    def set_api_key(self, api_key: str) -> None:
        """Store an API key and raise the rate to the keyed NCBI limit."""
        self.ncbi_api_key = api_key
        self.rate_limit_per_second = max(self.rate_limit_per_second, NCBI_RATE_WITH_KEY)


@dataclass
class RetrievalConfig:
    """Per-taxon retrieval settings."""
    max_per_order: int = 2
    search_multiplier: int = 3  # Extra IDs requested to allow for filtering
    complete_genome_keyword: str = "complete genome"
    save_genbank_records: bool = True


@dataclass
class OutputConfig:
    """Output layout settings."""
    directory: str = "co1_output"
    genbank_subdir: str = "genbank_records"
    summary_file: str = "retrieval_summary.csv"
    combined_file: str = "co1_sequences.fasta"
    combine: bool = True


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    directory: str = ".co1_logs"
    colors: bool = True


@dataclass
class Config:
    """Main configuration container."""
    api: APIConfig
    retrieval: RetrievalConfig
    output: OutputConfig
    logging: LoggingConfig

    @classmethod
    def default(cls) -> 'Config':
        """Create default configuration."""
        return cls(
            api=APIConfig(),
            retrieval=RetrievalConfig(),
            output=OutputConfig(),
            logging=LoggingConfig()
        )

    @classmethod
    def from_file(cls, path: Path) -> 'Config':
        """Load configuration from JSON file."""
        if not path.exists():
            return cls.default()

        with open(path, 'r') as f:
            data = json.load(f)

        api = APIConfig(**data.get('api', {}))
        if api.ncbi_api_key:
            api.set_api_key(api.ncbi_api_key)

        return cls(
            api=api,
            retrieval=RetrievalConfig(**data.get('retrieval', {})),
            output=OutputConfig(**data.get('output', {})),
            logging=LoggingConfig(**data.get('logging', {}))
        )

    def to_file(self, path: Path) -> None:
        """Save configuration to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            'api': asdict(self.api),
            'retrieval': asdict(self.retrieval),
            'output': asdict(self.output),
            'logging': asdict(self.logging)
        }

        with open(path, 'w') as f:
            json.dump(data, f, indent=2)

    def merge_env_vars(self) -> None:
        """Merge environment variables into configuration."""
        if os.getenv('NCBI_API_KEY'):
            self.api.set_api_key(os.getenv('NCBI_API_KEY'))
        if os.getenv('EMAIL'):
            self.api.email = os.getenv('EMAIL')
        if os.getenv('NCBI_RATE_LIMIT'):
            self.api.rate_limit_per_second = float(os.getenv('NCBI_RATE_LIMIT'))

        if os.getenv('CO1_OUTPUT_DIR'):
            self.output.directory = os.getenv('CO1_OUTPUT_DIR')
        if os.getenv('CO1_MAX_PER_ORDER'):
            self.retrieval.max_per_order = int(os.getenv('CO1_MAX_PER_ORDER'))

    def merge_cli_args(self, **kwargs) -> None:
        """Merge CLI arguments into configuration."""
        if kwargs.get('api_key'):
            self.api.set_api_key(kwargs['api_key'])
        if kwargs.get('email'):
            self.api.email = kwargs['email']

        if kwargs.get('max_per_order') is not None:
            self.retrieval.max_per_order = kwargs['max_per_order']
        if kwargs.get('no_genbank'):
            self.retrieval.save_genbank_records = False

        if kwargs.get('output_dir'):
            self.output.directory = kwargs['output_dir']
        if kwargs.get('combine') is not None:
            self.output.combine = kwargs['combine']

        if kwargs.get('log_level'):
            self.logging.level = kwargs['log_level']


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    locations = [
        Path.home() / '.co1_extract' / 'config.json',
        Path.home() / '.config' / 'co1_extract' / 'config.json',
        Path('.co1_extract.json'),
        Path('co1_extract.config.json')
    ]

    for path in locations:
        if path.exists():
            return path

    return Path.home() / '.co1_extract' / 'config.json'


def create_example_config(path: Optional[Path] = None) -> Path:
    """Create an example configuration file."""
    if path is None:
        path = Path('co1_extract.config.example.json')

    config = Config.default()

    config.api.ncbi_api_key = "your_api_key_here"
    config.api.email = "your_email@example.com"
    config.retrieval.max_per_order = 2
    config.output.directory = "all_animal_orders"

    config.to_file(path)
    return path
