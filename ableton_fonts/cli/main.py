"""
Main CLI entry point for ableton-font-replace.
"""

import math
import sys
from pathlib import Path

import click

from ableton_fonts import __version__
from ableton_fonts.config.paths import BACKUP_DIR
from ableton_fonts.config.slots import RECOMMENDED_FONTS
from ableton_fonts.core.errors import FontReplaceError
from ableton_fonts.operations.bundle import SignPolicy
from ableton_fonts.utils.logging import logger, set_verbose

HEADER = """\
╔══════════════════════════════════════════════════════════════╗
║        Ableton Live Font Replacement Tool                    ║
║        For improved readability (astigmatism-friendly)       ║
╚══════════════════════════════════════════════════════════════╝"""

EPILOG = "\b\nExamples:\n" + "\n".join(
    [
        "  ableton-font-replace                          # Install Atkinson Hyperlegible",
        "  ableton-font-replace --revert                 # Restore original fonts",
        "  ableton-font-replace --custom ~/my-font.ttf   # Use custom font",
        "  ableton-font-replace --scale 1.15             # Install 15% larger",
        "",
        "\b",
        "Recommended fonts for astigmatism:",
        *(f"  - {name}" for name in RECOMMENDED_FONTS),
    ]
)

SIGN_CHOICES = {
    1: SignPolicy.STRIP,
    2: SignPolicy.ADHOC,
    3: SignPolicy.SKIP,
}


def prompt_sign_policy() -> SignPolicy:
    """Ask how to handle the invalidated code signature."""
    click.echo()
    click.echo("Options:")
    click.echo("  1) Remove signature (app will show 'unidentified developer' warning)")
    click.echo("  2) Re-sign with ad-hoc signature (recommended)")
    click.echo("  3) Skip (app may not launch on some systems)")
    click.echo()
    choice = click.prompt("Choose option", type=click.IntRange(1, 3), default=2)
    return SIGN_CHOICES[choice]


def validate_scale(ctx, param, value):
    """Reject nan and inf, which FloatRange lets through."""
    if not math.isfinite(value):
        raise click.BadParameter(f"{value} is not a finite number.")
    return value


def policy_chooser(sign: str):
    """Return a callable choosing the signature policy for --sign."""
    if sign == "ask":
        return prompt_sign_policy
    policy = SignPolicy(sign)
    return lambda: policy


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG,
)
@click.option(
    "--install",
    "-i",
    "action",
    flag_value="install",
    default=True,
    help="Install Atkinson Hyperlegible font (default).",
)
@click.option(
    "--revert",
    "-r",
    "action",
    flag_value="revert",
    help="Revert to original Ableton fonts.",
)
@click.option(
    "--list",
    "-l",
    "action",
    flag_value="list",
    help="List available backups.",
)
@click.option(
    "--custom",
    "-c",
    "custom_font",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Use a custom TTF font file for every style.",
)
@click.option(
    "--scale",
    "-s",
    type=click.FloatRange(min=0, min_open=True),
    default=1.0,
    show_default=True,
    callback=validate_scale,
    help="Scale factor for the replacement font (e.g., 1.15).",
)
@click.option(
    "--snapshot",
    "snapshot_id",
    type=str,
    default=None,
    help="Backup to restore with --revert. Defaults to the latest.",
)
@click.option(
    "--app",
    "app_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    envvar="ABLETON_APP",
    default=None,
    help="Path to the Ableton Live app. Found automatically by default.",
)
@click.option(
    "--backup-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="ABLETON_FONT_BACKUP_DIR",
    default=BACKUP_DIR,
    show_default=True,
    help="Where backups of the original fonts are kept.",
)
@click.option(
    "--sign",
    type=click.Choice(["ask", "strip", "adhoc", "skip"]),
    default="ask",
    show_default=True,
    help="What to do with the app's code signature after modifying it.",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug output.")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, action, custom_font, scale, snapshot_id, app_path, backup_dir, sign, verbose):
    """Replace Ableton Live's UI fonts with an accessibility-friendly alternative."""
    set_verbose(verbose)
    click.secho(HEADER, fg="blue", err=True)

    if custom_font is not None:
        action = "custom"

    try:
        if action == "list":
            show_backups(backup_dir)
            return

        from ableton_fonts.utils.system import MacSystem

        system = ctx.obj or MacSystem()
        choose_policy = policy_chooser(sign)

        if action == "revert":
            from ableton_fonts.pipeline.runner import run_revert

            run_revert(
                system=system,
                backup_root=backup_dir,
                choose_policy=choose_policy,
                snapshot_id=snapshot_id,
            )
        else:
            install(system, custom_font, scale, backup_dir, choose_policy, app_path)
    except FontReplaceError as e:
        logger.error(str(e))
        if e.details:
            logger.debug(str(e.details))
        sys.exit(1)

    logger.warning("Please restart Ableton Live for changes to take effect.")


def install(system, custom_font, scale, backup_dir, choose_policy, app_path):
    """Run the install pipeline and print the follow-up hints."""
    from ableton_fonts.config.slots import ATKINSON_NAME
    from ableton_fonts.pipeline.runner import CustomSource, DownloadSource, run_install

    source = CustomSource(custom_font) if custom_font else DownloadSource()
    run_install(
        source,
        scale,
        system=system,
        backup_root=backup_dir,
        choose_policy=choose_policy,
        app_path=app_path,
    )

    click.echo()
    if custom_font:
        click.echo(f"{custom_font.name} is now installed in Ableton Live.")
    else:
        click.echo(f"{click.style(ATKINSON_NAME, fg='green')} is now installed in Ableton Live.")
        click.echo("This font was designed by the Braille Institute for improved readability.")
    click.echo()
    click.echo("To revert: ableton-font-replace --revert")


def show_backups(backup_dir: Path) -> None:
    """Print available backups."""
    from ableton_fonts.pipeline.runner import run_list

    logger.info("Available backups:")
    entries = run_list(backup_dir)
    if not entries:
        click.echo("No backups found")
        return

    for timestamp, bundle_path in entries:
        click.echo(f"  - {timestamp} ({Path(bundle_path).name})")


if __name__ == "__main__":
    cli()
