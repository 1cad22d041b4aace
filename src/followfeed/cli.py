import json

import click
import requests

from .errors import FeedError
from .models import FeedOptions
from .runtime import reset_verbose_logging, set_verbose_logging


def _render(feed_dict, fmt):
    if fmt == "yaml":
        import yaml

        return yaml.safe_dump(
            feed_dict, allow_unicode=True, sort_keys=False, default_flow_style=False
        ).rstrip()
    return json.dumps(feed_dict, ensure_ascii=False, indent=2)


def _run(ctx, resolve, fmt):
    token = set_verbose_logging(ctx.obj.get("verbose", False))
    try:
        feed = resolve()
    except (FeedError, requests.RequestException) as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        reset_verbose_logging(token)
    click.echo(_render(feed.to_dict(), fmt))
    if feed.skipped:
        click.echo(f"Skipped {feed.skipped} entries that failed to normalize", err=True)


format_option = click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(["json", "yaml"]),
    default="json",
    show_default=True,
    help="Output format",
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr")
@click.pass_context
def cli(ctx, verbose):
    """Normalize a bilibili account's followings feed into feed items."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command("dynamic")
@click.argument("uid")
@click.argument("route_params", required=False, default="")
@click.option("--show-emoji", is_flag=True, help="Inline emoji images")
@click.option("--disable-embed", is_flag=True, help="Omit player iframes and videos")
@click.option(
    "--display-article", is_flag=True, help="Expand article entries to full text"
)
@click.option(
    "--skip-failed", is_flag=True, help="Drop entries that fail instead of aborting"
)
@format_option
@click.pass_context
def dynamic_cmd(
    ctx, uid, route_params, show_emoji, disable_embed, display_article, skip_failed, fmt
):
    """Every dynamic posted by accounts UID follows.

    ROUTE_PARAMS accepts the query-string form, e.g. showEmoji=1&disableEmbed=1.
    """
    from .feeds import followings_dynamic

    parsed = FeedOptions.from_route_params(route_params)
    options = FeedOptions(
        show_emoji=show_emoji or parsed.show_emoji,
        disable_embed=disable_embed or parsed.disable_embed,
        display_article=display_article or parsed.display_article,
        skip_failed=skip_failed or parsed.skip_failed,
    )
    _run(ctx, lambda: followings_dynamic(uid, options), fmt)


@cli.command("video")
@click.argument("uid")
@click.option("--disable-embed", is_flag=True, help="Omit player iframes")
@click.option(
    "--skip-failed", is_flag=True, help="Drop entries that fail instead of aborting"
)
@format_option
@click.pass_context
def video_cmd(ctx, uid, disable_embed, skip_failed, fmt):
    """Video uploads from accounts UID follows."""
    from .feeds import followings_video

    options = FeedOptions(disable_embed=disable_embed, skip_failed=skip_failed)
    _run(ctx, lambda: followings_video(uid, options), fmt)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
