from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence, TextIO

import typer

from puzzlehelper.classical.monoalphabetic.caesar import caesar_shifts
from puzzlehelper.classical.monoalphabetic.hillclimb import solve_hillclimb
from puzzlehelper.classical.monoalphabetic.substitution import solve_substitution
from puzzlehelper.core.config import DEFAULT_NGRAM_SIZE, HillclimbConfig, SubstitutionConfig, WordSearchConfig
from puzzlehelper.core.dictionary import load_dictionary
from puzzlehelper.core.errors import PuzzleError
from puzzlehelper.core.features import letter_frequencies
from puzzlehelper.core.logger import configure_logging
from puzzlehelper.core.ngrams import FrequencyModel
from puzzlehelper.core.trie import Trie
from puzzlehelper.wordplay.search import solve_letter_banks, solve_transposals

app = typer.Typer(help="puzzlehelper: word puzzle solvers + classical cryptanalysis helpers.")
cryptogram_app = typer.Typer(help="Tools for puzzle-level cryptanalysis.")
substitution_app = typer.Typer(help="Tools for dealing with simple substitution ciphers.")
cryptogram_app.add_typer(substitution_app, name="substitution")
app.add_typer(cryptogram_app, name="cryptogram")


@app.callback()
def _init(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v for info logs, -vv for debug."),
):
    configure_logging(verbose)


# ----------------------------
# helpers
# ----------------------------

@contextmanager
def _open_text(path: str) -> Iterator[TextIO]:
    """'-' means stdin."""
    if path == "-":
        yield sys.stdin
        return
    with open(path, encoding="utf-8") as f:
        yield f


def _load_trie(path: str) -> Trie:
    try:
        with _open_text(path) as f:
            return load_dictionary(f)
    except OSError as e:
        raise typer.BadParameter(f"Could not access dictionary: {e}")
    except UnicodeDecodeError as e:
        raise typer.BadParameter(f"Dictionary is not valid UTF-8: {e}")


def _load_model(path: str) -> FrequencyModel:
    try:
        with _open_text(path) as f:
            return FrequencyModel.from_lines(f)
    except OSError as e:
        raise typer.BadParameter(f"Could not access frequency file: {e}")
    except UnicodeDecodeError as e:
        raise typer.BadParameter(f"Frequency file is not valid UTF-8: {e}")
    except PuzzleError as e:
        raise typer.BadParameter(str(e))


def _emit(results: Sequence, as_json: bool, *, sep: Optional[str] = None) -> None:
    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2))
        return
    if not results:
        typer.echo("No solutions found.")
        return
    for r in results:
        typer.echo(str(r))
        if sep is not None:
            typer.echo(sep)


def _word_search_config(
    min_word_length: int,
    max_word_length: Optional[int],
    min_words: int,
    max_words: Optional[int],
    max_seconds: Optional[float],
) -> WordSearchConfig:
    try:
        return WordSearchConfig(
            min_word_len=min_word_length,
            max_word_len=max_word_length,
            min_words=min_words,
            max_words=max_words,
            max_seconds=max_seconds,
        )
    except PuzzleError as e:
        raise typer.BadParameter(str(e))


# ----------------------------
# word puzzles
# ----------------------------

@app.command()
def transposal(
    text: List[str] = typer.Argument(..., help="Letters to rearrange; multiple arguments are joined."),
    dictionary: str = typer.Option(..., "--dictionary", "-d", help="Dictionary file to use, or - to use stdin."),
    min_word_length: int = typer.Option(1, "--min-word-length", help="Minimum length of each word."),
    max_word_length: Optional[int] = typer.Option(None, "--max-word-length", help="Maximum length of each word."),
    min_words: int = typer.Option(1, "--min-words", help="Minimum number of words in a solution."),
    max_words: Optional[int] = typer.Option(None, "--max-words", help="Maximum number of words in a solution."),
    max_seconds: Optional[float] = typer.Option(None, "--max-seconds", help="Stop searching after this long."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
):
    """
    Find transposals (multi-word anagrams) of TEXT. Lower word lengths or
    higher word counts take longer.
    """
    config = _word_search_config(min_word_length, max_word_length, min_words, max_words, max_seconds)
    trie = _load_trie(dictionary)
    _emit(solve_transposals("".join(text), trie, config), as_json)


@app.command()
def letterbank(
    text: List[str] = typer.Argument(..., help="Text whose unique letters form the bank."),
    dictionary: str = typer.Option(..., "--dictionary", "-d", help="Dictionary file to use, or - to use stdin."),
    min_word_length: int = typer.Option(1, "--min-word-length", help="Minimum length of each word."),
    max_word_length: Optional[int] = typer.Option(None, "--max-word-length", help="Maximum length of each word."),
    min_words: int = typer.Option(1, "--min-words", help="Minimum number of words in a solution."),
    max_words: Optional[int] = typer.Option(None, "--max-words", help="Maximum number of words in a solution."),
    max_seconds: Optional[float] = typer.Option(None, "--max-seconds", help="Stop searching after this long."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
):
    """
    Find letter banks of TEXT: words or phrases using exactly the same set of
    unique letters. LENDS is a letter bank of NEEDLESS ({D, E, L, N, S}).
    """
    config = _word_search_config(min_word_length, max_word_length, min_words, max_words, max_seconds)
    trie = _load_trie(dictionary)
    _emit(solve_letter_banks("".join(text), trie, config), as_json)


# ----------------------------
# cryptogram tools
# ----------------------------

@cryptogram_app.command()
def freq(text: List[str] = typer.Argument(...)):
    """Single-letter frequency table for TEXT."""
    table = letter_frequencies(" ".join(text))
    typer.echo("Frequency Table")
    typer.echo("---------------")
    typer.echo(f"Total letters: {sum(row.count for row in table)}")
    for row in table:
        typer.echo(str(row))


@cryptogram_app.command()
def caesar(
    text: List[str] = typer.Argument(...),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
):
    """Print all 25 Caesar shifts of TEXT."""
    _emit(caesar_shifts(" ".join(text)), as_json)


@cryptogram_app.command()
def ngrams(
    corpus: str = typer.Option(..., "--corpus", "-c", help="Path to the source text, or - for stdin."),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file (defaults to stdout)."),
    ngram_length: int = typer.Option(DEFAULT_NGRAM_SIZE, "--ngram-length", "-n", help="Length of the ngrams to generate."),
):
    """
    Build an ngram frequency table (ngram TAB log10 frequency) from a corpus.
    The output feeds `cryptogram substitution hillclimb`.
    """
    try:
        with _open_text(corpus) as f:
            model = FrequencyModel.from_corpus(f, ngram_length)
    except OSError as e:
        raise typer.BadParameter(f"Error opening {corpus}: {e}")
    except UnicodeDecodeError as e:
        raise typer.BadParameter(f"Corpus is not valid UTF-8: {e}")
    except PuzzleError as e:
        raise typer.BadParameter(str(e))

    if output is None:
        for line in model.to_lines():
            typer.echo(line)
        return
    try:
        with open(output, "w", encoding="utf-8") as out:
            for line in model.to_lines():
                out.write(line + "\n")
    except OSError as e:
        raise typer.BadParameter(f"Could not open {output} for writing: {e}")


@substitution_app.command()
def solve(
    text: List[str] = typer.Argument(..., help="Word-separated ciphertext."),
    dictionary: str = typer.Option(..., "--dictionary", "-d", help="Dictionary file to use, or - to use stdin."),
    concurrency: int = typer.Option(10, "--concurrency", "-c", help="Maximum worker threads for solving."),
    frequency_file: Optional[str] = typer.Option(
        None, "--frequency-file", "-f", help="Optional ngram table used to rank the solutions."
    ),
    max_seconds: Optional[float] = typer.Option(None, "--max-seconds", help="Stop searching after this long."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
):
    """
    Match each ciphertext word against dictionary words of the same letter
    pattern and print every consistent decoding.
    """
    try:
        config = SubstitutionConfig(concurrency=concurrency, max_seconds=max_seconds)
    except PuzzleError as e:
        raise typer.BadParameter(str(e))
    model = _load_model(frequency_file) if frequency_file else None
    trie = _load_trie(dictionary)
    _emit(solve_substitution(" ".join(text), trie, config, model=model), as_json)


@substitution_app.command()
def hillclimb(
    text: List[str] = typer.Argument(..., help="Ciphertext."),
    frequency_file: str = typer.Option(
        ..., "--frequency-file", "-f", help="ngram TAB log10 frequency table, or - for stdin."
    ),
    generations: int = typer.Option(50, "--generations", "-g", help="Number of random restarts to run."),
    mutations: int = typer.Option(1, "--mutations", "-m", help="Swaps applied to the key per neighbour."),
    regen_after: int = typer.Option(1000, "--regen-after", "-r", help="Steps without improvement before restarting."),
    candidates: int = typer.Option(10, "--candidates", "-c", help="Number of top candidates to display."),
    local_lookaround: int = typer.Option(1, "--local-lookaround", "-l", help="Neighbours evaluated per step."),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducible runs."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON."),
):
    """
    Hill-climb substitution keys until the deciphered text's ngram statistics
    match the frequency table. The ngram size comes from the table.
    """
    try:
        config = HillclimbConfig(
            generations=generations,
            mutations=mutations,
            regen_after=regen_after,
            candidate_count=candidates,
            local_lookaround=local_lookaround,
            seed=seed,
        )
    except PuzzleError as e:
        raise typer.BadParameter(str(e))

    model = _load_model(frequency_file)
    try:
        results = solve_hillclimb(" ".join(text), model, config)
    except PuzzleError as e:
        raise typer.BadParameter(str(e))
    _emit(results, as_json, sep="")


def main():
    app()


if __name__ == "__main__":
    main()
