"""CLI interface for tweet-intent.

Commands:
    setup     - Write the config file
    url       - Build a tweet intent URL from form fields
    count     - Estimate the length of the resulting post
    snippets  - List, add, update and delete reusable snippets
    export    - Write snippets to a JSON export file
    import    - Add snippets from an export file
    settings  - Show, change or reset preferences
    draft     - Show or save the remembered form values
"""

import asyncio
import json
import sys
from pathlib import Path

import click

from .config import CONFIG_FILE, AppConfig, config_exists, load_config, save_config
from .logging_config import setup_logging

FORM_OPTIONS = [
    click.option("--text", default="", help="Post text"),
    click.option("--url", default="", help="Link to share"),
    click.option("--tags", default="", help="Hashtags, comma or space separated"),
    click.option("--via", default="", help="Account to credit (@ optional)"),
    click.option("--related", default="", help="Related accounts, comma separated"),
]


def form_options(func):
    for option in reversed(FORM_OPTIONS):
        func = option(func)
    return func


def _config(ctx) -> AppConfig:
    config_path = ctx.obj["config_path"]
    return load_config(config_path) if config_exists(config_path) else AppConfig()


def _core(ctx):
    from .core import build_core

    return build_core(_config(ctx))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--config", type=click.Path(), default=None, help="Config file path")
@click.pass_context
def main(ctx, verbose, config):
    """Tweet Intent — Compose pre-filled share links and keep reusable snippets."""
    setup_logging(debug=verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else CONFIG_FILE


@main.command()
@click.option("--data-dir", type=click.Path(), default=None, help="Where snippet files live")
@click.option("--namespace", default=None, help="Prefix for stored keys")
@click.option("--base-url", default=None, help="Intent endpoint")
@click.option("--debounce-ms", type=click.IntRange(min=0), default=None, help="Draft save delay")
@click.pass_context
def setup(ctx, data_dir, namespace, base_url, debounce_ms):
    """Write the config file, keeping values not given here."""
    config_path = ctx.obj["config_path"]
    try:
        config = _config(ctx)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if data_dir is not None:
        config.data_dir = Path(data_dir).expanduser()
    if namespace is not None:
        if not namespace.strip():
            click.echo("Error: Namespace must not be empty.", err=True)
            sys.exit(1)
        config.namespace = namespace
    if base_url is not None:
        config.base_url = base_url
    if debounce_ms is not None:
        config.debounce_ms = debounce_ms

    save_config(config, config_path)
    click.echo(f"Config saved to {config_path}")


@main.command()
@form_options
@click.pass_context
def url(ctx, text, url, tags, via, related):
    """Print the intent URL for the given fields."""
    from .compose import params_from_form
    from .intent import build_intent_url

    params = params_from_form(text, url, tags, via, related)
    click.echo(build_intent_url(params, base_url=_config(ctx).base_url))


@main.command()
@form_options
def count(text, url, tags, via, related):
    """Print the estimated post length and whether it fits."""
    from .compose import params_from_form
    from .intent import MAX_TWEET_LENGTH, estimate_tweet_length, length_state

    length = estimate_tweet_length(params_from_form(text, url, tags, via, related))
    click.echo(f"{length}/{MAX_TWEET_LENGTH} ({length_state(length)})")


# ── Snippets ──


@main.group()
def snippets():
    """Manage reusable text and hashtag snippets."""


@snippets.command("list")
@click.pass_context
def snippets_list(ctx):
    """List stored snippets."""
    collection = asyncio.run(_core(ctx).snippets.get_all())

    click.echo(f"Texts ({len(collection.texts)}):")
    for t in collection.texts:
        click.echo(f"  {t.id}  {t.label}")
    click.echo(f"Hashtags ({len(collection.hashtags)}):")
    for h in collection.hashtags:
        click.echo(f"  {h.id}  #{h.tag}")


@snippets.command("add-text")
@click.argument("content")
@click.option("--label", default="", help="Label (defaults to the start of the content)")
@click.pass_context
def snippets_add_text(ctx, content, label):
    """Store a reusable text snippet."""
    from .snippets import SnippetStorageError, SnippetValidationError

    try:
        item = asyncio.run(_core(ctx).snippets.add_text(label, content))
    except (SnippetValidationError, SnippetStorageError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Added text snippet {item.id}")


@snippets.command("add-tag")
@click.argument("tag")
@click.option("--label", default="", help="Label (defaults to #tag)")
@click.pass_context
def snippets_add_tag(ctx, tag, label):
    """Store a reusable hashtag."""
    from .snippets import SnippetStorageError, SnippetValidationError

    try:
        item = asyncio.run(_core(ctx).snippets.add_hashtag(label, tag))
    except (SnippetValidationError, SnippetStorageError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Added hashtag snippet {item.id} (#{item.tag})")


@snippets.command("delete")
@click.argument("kind", type=click.Choice(["text", "hashtag"]))
@click.argument("snippet_id")
@click.pass_context
def snippets_delete(ctx, kind, snippet_id):
    """Delete a snippet by id."""
    from .snippets import SnippetStorageError

    try:
        removed = asyncio.run(_core(ctx).snippets.delete(kind, snippet_id))
    except SnippetStorageError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if removed is None:
        click.echo(f"Error: No {kind} snippet with id {snippet_id}", err=True)
        sys.exit(1)
    click.echo(f"Deleted {kind} snippet {snippet_id}")


@snippets.command("update")
@click.argument("kind", type=click.Choice(["text", "hashtag"]))
@click.argument("snippet_id")
@click.option("--label", default=None, help="New label")
@click.option("--content", default=None, help="New content (text snippets)")
@click.option("--tag", default=None, help="New tag (hashtag snippets)")
@click.pass_context
def snippets_update(ctx, kind, snippet_id, label, content, tag):
    """Change the label, content or tag of a snippet."""
    from .snippets import SnippetStorageError, SnippetValidationError

    patch = {
        name: value
        for name, value in (("label", label), ("content", content), ("tag", tag))
        if value is not None
    }
    if not patch:
        click.echo("Error: Nothing to update.", err=True)
        sys.exit(1)

    try:
        item = asyncio.run(_core(ctx).snippets.update(kind, snippet_id, patch))
    except (SnippetValidationError, SnippetStorageError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    if item is None:
        click.echo(f"Error: No {kind} snippet with id {snippet_id}", err=True)
        sys.exit(1)
    click.echo(f"Updated {kind} snippet {snippet_id}")


# ── Export / import ──


@main.command()
@click.option("-o", "--output", type=click.Path(), default=None, help="Output JSON file")
@click.option(
    "--auto-name",
    is_flag=True,
    help="Write to a dated file name in the current directory",
)
@click.pass_context
def export(ctx, output, auto_name):
    """Export snippets as JSON.

    If neither -o nor --auto-name is given, JSON is written to stdout.
    """
    from .transfer import build_export, export_filename

    collection = asyncio.run(_core(ctx).snippets.get_all())
    content = json.dumps(build_export(collection), indent=2, ensure_ascii=False)

    if auto_name and not output:
        output = export_filename()
    if output:
        output_path = Path(output)
        output_path.write_text(content + "\n", encoding="utf-8")
        click.echo(
            f"Exported {len(collection.texts) + len(collection.hashtags)} "
            f"snippets to {output_path}",
            err=True,
        )
    else:
        click.echo(content)


@main.command("import")
@click.argument("input_file", type=click.Path(exists=True))
@click.pass_context
def import_(ctx, input_file):
    """Add snippets from an export file, skipping ones already stored."""
    from .transfer import ImportFormatError, import_snippets, parse_import

    try:
        data = parse_import(Path(input_file).read_bytes())
        result = asyncio.run(import_snippets(_core(ctx).snippets, data))
    except ImportFormatError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if result.failed:
        click.echo(
            f"Error: {result.failed} snippets could not be saved "
            f"({result.imported} imported, {result.duplicates} duplicates)",
            err=True,
        )
        sys.exit(1)
    if result.imported and result.duplicates:
        click.echo(f"Imported {result.imported} ({result.duplicates} duplicates)")
    elif result.imported:
        click.echo(f"Imported {result.imported}")
    elif result.duplicates:
        click.echo(f"All {result.duplicates} already present")
    else:
        click.echo("Nothing to import")


# ── Settings ──


@main.group("settings")
def settings_group():
    """Show or change preferences."""


@settings_group.command("show")
@click.pass_context
def settings_show(ctx):
    """Print the current settings as JSON."""
    settings = asyncio.run(_core(ctx).settings.get())
    click.echo(json.dumps(settings.to_dict(), indent=2))


@settings_group.command("set")
@click.option("--save-text/--no-save-text", default=None, help="Remember post text")
@click.option("--save-url/--no-save-url", default=None, help="Remember the link")
@click.option("--save-hashtags/--no-save-hashtags", default=None, help="Remember hashtags")
@click.option("--save-via/--no-save-via", default=None, help="Remember the via account")
@click.option("--save-related/--no-save-related", default=None, help="Remember related accounts")
@click.option("--compact/--no-compact", default=None, help="Compact layout")
@click.pass_context
def settings_set(ctx, save_text, save_url, save_hashtags, save_via, save_related, compact):
    """Change individual settings, keeping the rest."""
    core = _core(ctx)

    async def apply():
        settings = await core.settings.get()
        flags = settings.save_draft
        for name, value in (
            ("text", save_text),
            ("url", save_url),
            ("hashtags", save_hashtags),
            ("via", save_via),
            ("related", save_related),
        ):
            if value is not None:
                setattr(flags, name, value)
        if compact is not None:
            settings.compact_mode = compact
        return await core.settings.set(settings)

    if not asyncio.run(apply()):
        click.echo("Error: Settings could not be saved.", err=True)
        sys.exit(1)
    click.echo("Settings saved.")


@settings_group.command("reset")
@click.pass_context
def settings_reset(ctx):
    """Restore the default settings."""
    if not asyncio.run(_core(ctx).settings.reset()):
        click.echo("Error: Settings could not be saved.", err=True)
        sys.exit(1)
    click.echo("Settings reset to defaults.")


# ── Draft ──


@main.group()
def draft():
    """Show or save the remembered form values."""


@draft.command("show")
@click.pass_context
def draft_show(ctx):
    """Print the saved draft as JSON."""
    saved = asyncio.run(_core(ctx).drafts.get())
    if saved is None:
        click.echo("No draft saved.")
        return
    click.echo(json.dumps(saved.to_dict(), indent=2, ensure_ascii=False))


@draft.command("save")
@form_options
@click.pass_context
def draft_save(ctx, text, url, tags, via, related):
    """Save form values, keeping only the fields enabled in settings."""
    from .compose import params_from_form

    params = params_from_form(text, url, tags, via, related)
    if not asyncio.run(_core(ctx).drafts.set(params)):
        click.echo("Error: Draft could not be saved.", err=True)
        sys.exit(1)
    click.echo("Draft saved.")
