"""
Command-line interface for mfqe.

mfqe: extract multiple sets of FASTQ/FASTA sequences by name.
"""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import ExtractionConfig, SequenceFormat, log_level_from_env
from .errors import ConfigurationError, MfqeError

logger = logging.getLogger(__name__)


class MultiValueCommand(click.Command):
    """Command whose `multiple` options also accept several values per flag.

    `--lists a b c` is rewritten to `--lists a --lists b --lists c` before
    parsing, so both spellings work.
    """

    def parse_args(self, ctx, args):
        multi_flags = set()
        for param in self.params:
            if isinstance(param, click.Option) and param.multiple:
                multi_flags.update(param.opts)
        return super().parse_args(ctx, expand_multi_value_args(args, multi_flags))


def expand_multi_value_args(args, multi_flags):
    """Repeat a multi-value flag before each of the values following it."""
    expanded = []
    current = None
    pending = False
    args = list(args)

    for pos, arg in enumerate(args):
        if arg == '--':
            expanded.extend(args[pos:])
            current = None
            break

        if arg in multi_flags:
            if current is not None and pending:
                expanded.append(current)
            current, pending = arg, True
            continue

        if current is not None and not arg.startswith('-'):
            expanded.extend([current, arg])
            pending = False
            continue

        if current is not None and pending:
            expanded.append(current)
        current, pending = None, False

        flag = arg.split('=', 1)[0]
        if '=' in arg and flag in multi_flags:
            current = flag
        expanded.append(arg)

    if current is not None and pending:
        expanded.append(current)

    return expanded


def build_config(config_file, input_fastq, input_fasta, output_fastq_files,
                 output_fasta_files, name_lists, output_uncompressed, append,
                 sequence_prefix, summary_tsv) -> ExtractionConfig:
    """Combine command line options with an optional YAML config file.

    Options given on the command line take precedence over the file.
    """
    if input_fastq and input_fasta:
        raise ConfigurationError("Only one of --input-fastq and --input-fasta may be given")
    if output_fastq_files and output_fasta_files:
        raise ConfigurationError(
            "Only one of --output-fastq-files and --output-fasta-files may be given"
        )

    if output_fastq_files:
        sequence_format, outputs = SequenceFormat.FASTQ, list(output_fastq_files)
    elif output_fasta_files:
        sequence_format, outputs = SequenceFormat.FASTA, list(output_fasta_files)
    else:
        sequence_format, outputs = None, []

    if config_file:
        config = ExtractionConfig.from_yaml(Path(config_file))
        if sequence_format is not None:
            config.sequence_format = sequence_format
            config.output_paths = [Path(p) for p in outputs]
    elif sequence_format is None:
        raise ConfigurationError(
            "One of --output-fastq-files or --output-fasta-files is required"
        )
    else:
        config = ExtractionConfig(sequence_format=sequence_format, output_paths=outputs)

    if name_lists:
        config.name_lists = [Path(p) for p in name_lists]

    if input_fastq and config.sequence_format != SequenceFormat.FASTQ:
        raise ConfigurationError("--input-fastq requires FASTQ outputs")
    if input_fasta and config.sequence_format != SequenceFormat.FASTA:
        raise ConfigurationError("--input-fasta requires FASTA outputs")
    if input_fastq or input_fasta:
        config.input_path = Path(input_fastq or input_fasta)

    if output_uncompressed:
        config.compress = False
    if append:
        config.append = True
    if sequence_prefix is not None:
        config.sequence_prefix = sequence_prefix
    if summary_tsv:
        config.summary_path = Path(summary_tsv)

    return config


@click.command(cls=MultiValueCommand)
@click.version_option(version=__version__)
@click.option('--input-fastq', type=click.Path(exists=True, dir_okay=False),
              help='Input FASTQ file, optionally gzipped (default: standard input)')
@click.option('--input-fasta', type=click.Path(exists=True, dir_okay=False),
              help='Input FASTA file, optionally gzipped (default: standard input)')
@click.option('--output-fastq-files', type=click.Path(dir_okay=False), multiple=True,
              help='Output FASTQ files, one per name list')
@click.option('--output-fasta-files', type=click.Path(dir_okay=False), multiple=True,
              help='Output FASTA files, one per name list')
@click.option('--sequence-name-lists', '-l', '--fastq-read-name-lists',
              '--fasta-read-name-lists', 'name_lists',
              type=click.Path(dir_okay=False), multiple=True,
              help='Files of sequence names (one per line, without comments)')
@click.option('--output-uncompressed', is_flag=True, default=False,
              help='Write uncompressed output (default: gzip)')
@click.option('--append', is_flag=True, default=False,
              help='Append to output files instead of overwriting them')
@click.option('--sequence-prefix', type=str,
              help='Text prepended to every output sequence name')
@click.option('--summary-tsv', type=click.Path(dir_okay=False),
              help='Write expected/observed counts per name list to this TSV')
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file; command line options take precedence')
def main(input_fastq, input_fasta, output_fastq_files, output_fasta_files,
         name_lists, output_uncompressed, append, sequence_prefix, summary_tsv,
         config_file):
    """
    Extract multiple sets of FASTQ or FASTA sequences by name.

    Each name list is paired with the output file at the same position.
    Every input sequence named in a list is written to that list's output;
    a name in several lists is written to each of them. The run fails unless
    every listed name is found exactly once per list.

    \b
    Example:
      mfqe --input-fastq reads.fq.gz \\
           --sequence-name-lists names1.txt names2.txt \\
           --output-fastq-files out1.fq.gz out2.fq.gz
    """
    from .pipeline import run_extraction

    try:
        level = log_level_from_env()
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Set up logging
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        config = build_config(
            config_file, input_fastq, input_fasta, output_fastq_files,
            output_fasta_files, name_lists, output_uncompressed, append,
            sequence_prefix, summary_tsv,
        )
        summary = run_extraction(config)
    except MfqeError as e:
        logger.debug("Extraction failed", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(str(summary))


if __name__ == '__main__':
    main()
