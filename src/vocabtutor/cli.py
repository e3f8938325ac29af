"""CLI entry point for VocabTutor."""

import logging
from pathlib import Path

import click


def _store():
    from vocabtutor.config.settings import Settings
    from vocabtutor.state.words import WordStore

    return WordStore(db_path=Settings.load().db_path)


@click.group(invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Log to stderr")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """VocabTutor — Portuguese/French vocabulary trainer."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        ctx.invoke(launch)


@main.command()
def launch() -> None:
    """Launch the interactive terminal app."""
    from vocabtutor.app.main_app import VocabTutorApp

    VocabTutorApp().run()


@main.command()
@click.option("--search", "-s", default="", help="Filter by Portuguese or French text")
@click.option(
    "--sort", "order",
    type=click.Choice(["newest", "oldest", "alphabetical"]),
    default="newest", show_default=True,
)
def words(search: str, order: str) -> None:
    """List saved words."""
    from vocabtutor.state.words import filter_words, sort_words

    listed = sort_words(filter_words(_store().list(), search), order)
    if not listed:
        click.echo("No words found.")
        return
    for w in listed:
        click.echo(f"  {w.portuguese} → {w.french}  ({w.id})")
        for example in w.examples:
            click.echo(f"      · {example}")


@main.command()
@click.argument("portuguese")
@click.argument("french")
@click.option("--example", "-e", "examples", multiple=True, help="Example sentence (repeatable)")
@click.option("--generate", is_flag=True, help="Generate example sentences with Claude")
def add(portuguese: str, french: str, examples: tuple, generate: bool) -> None:
    """Add a word: PORTUGUESE FRENCH."""
    from vocabtutor.engine.generator import GenerationError, TextGenerator, generate_examples

    examples_list = list(examples)
    if generate:
        try:
            examples_list = generate_examples(TextGenerator(), portuguese, french)
        except GenerationError as e:
            raise click.ClickException(str(e))

    try:
        word_id = _store().create(portuguese, french, examples_list)
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Added {portuguese} ({word_id})")


@main.command()
@click.argument("word_id")
def delete(word_id: str) -> None:
    """Delete a word by id."""
    _store().delete(word_id)
    click.echo(f"Deleted {word_id}")


@main.command()
@click.option("--rounds", "-n", default=10, show_default=True, help="Number of questions")
def quiz(rounds: int) -> None:
    """Run a quick translation quiz in the terminal."""
    from vocabtutor.engine.quiz_runner import QuizRunner

    runner = QuizRunner(_store().list)
    for _ in range(rounds):
        state = runner.next_word()
        if state is None:
            click.echo("No words to learn yet. Add some with `vocabtutor add`.")
            return

        target = "French" if state.show_portuguese else "Portuguese"
        answer = click.prompt(f"{state.prompt} → {target}", default="", show_default=False)
        result = runner.submit(answer)
        if result is None:
            click.echo(f"  Skipped. Answer: {state.expected}")
        elif result.passed:
            click.secho("  Correct!", fg="green")
        else:
            click.secho(f"  Not quite. Answer: {result.correct_answer}", fg="yellow")

    stats = runner.stats
    click.echo(f"\nScore: {stats.correct}/{stats.total_attempts} ({stats.accuracy:.0%})")


@main.command()
@click.option("--show-words", is_flag=True, help="List the vocabulary used in the story")
def story(show_words: bool) -> None:
    """Generate a reading story from your vocabulary."""
    from vocabtutor.config.settings import Settings
    from vocabtutor.engine.generator import GenerationError, TextGenerator, generate_story
    from vocabtutor.engine.story import MIN_STORY_WORDS
    from vocabtutor.state.story_cache import StoryCache
    from vocabtutor.state.words import WordStore

    settings = Settings.load()
    all_words = WordStore(db_path=settings.db_path).list()
    if len(all_words) < MIN_STORY_WORDS:
        raise click.ClickException(
            f"You need at least {MIN_STORY_WORDS} words to generate a story."
        )

    try:
        result = generate_story(TextGenerator(settings=settings), all_words)
    except GenerationError as e:
        raise click.ClickException(str(e))

    StoryCache(path=settings.story_path).save(result)
    click.echo(result.story)
    if show_words:
        click.echo("")
        for w in result.used_words:
            click.echo(f"  {w.portuguese} → {w.french}")


@main.command(name="export")
@click.argument("path", type=click.Path(path_type=Path), default=Path("."))
def export_cmd(path: Path) -> None:
    """Export all words to a JSON backup."""
    from vocabtutor.state.backup import export_backup

    all_words = _store().list()
    if not all_words:
        raise click.ClickException("There are no words to export.")
    written = export_backup(all_words, path)
    click.echo(f"Exported {len(all_words)} words to {written}")


@main.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.confirmation_option(prompt="This replaces all current words. Continue?")
def import_cmd(path: Path) -> None:
    """Replace all words with a JSON backup."""
    from vocabtutor.state.backup import BackupError, import_backup

    try:
        count = import_backup(path, _store())
    except BackupError as e:
        raise click.ClickException(str(e))
    click.echo(f"Imported {count} words.")


@main.command()
def status() -> None:
    """Show vocabulary size, speech backend and generation setup."""
    from vocabtutor.config.settings import Settings
    from vocabtutor.engine.speech import detect_synthesizer
    from vocabtutor.state.words import WordStore

    settings = Settings.load()
    click.echo(f"Words: {WordStore(db_path=settings.db_path).count()}")
    click.echo(f"Speech: {detect_synthesizer(settings).name}")
    configured = "configured" if settings.claude.get_api_key() else "not configured"
    click.echo(f"Claude ({settings.claude.get_model()}): {configured}")


@main.command()
@click.option("--speech", "backend", type=click.Choice(["auto", "espeak", "silent"]), default=None)
@click.option("--model", default=None, help="Claude model used for generation")
@click.option("--countdown", type=click.IntRange(min=0), default=None, help="Seconds to think in listen mode")
def config(backend, model, countdown) -> None:
    """Show or update ~/.vocabtutor/config.yaml."""
    from vocabtutor.config.settings import Settings, SpeechBackend

    path = Settings.config_path()
    settings = Settings.load(path)
    if backend is not None:
        settings.speech.backend = SpeechBackend(backend)
    if model is not None:
        settings.claude.model = model
    if countdown is not None:
        settings.speech.countdown_seconds = countdown
    if any(v is not None for v in (backend, model, countdown)):
        settings.save(path)
        click.echo(f"Saved {path}")

    click.echo(f"Data dir:  {settings.data_dir}")
    click.echo(f"Model:     {settings.claude.model}")
    click.echo(f"Speech:    {settings.speech.backend.value}")
    click.echo(f"Countdown: {settings.speech.countdown_seconds}s")
