"""Terminal client: log in and take a timed exam.

Example:
    python -m app.client.cli login --email student@example.com
    python -m app.client.cli take-exam --minutes 20 --image-filter text
"""

import sys

import click

from app.client.api import DEFAULT_BASE_URL, ApiError, ProviquizClient
from app.client.exam_store import ExamStatus, ExamStore


@click.group()
@click.option("--api-url", default=DEFAULT_BASE_URL, envvar="PROVIQUIZ_API_URL", help="API base URL")
@click.pass_context
def cli(ctx: click.Context, api_url: str):
    """PROVIQUIZ terminal client."""
    ctx.obj = ProviquizClient(base_url=api_url)
    ctx.call_on_close(ctx.obj.close)


@cli.command()
@click.option("--email", prompt=True)
@click.option("--password", prompt=True, hide_input=True)
@click.option("--remember/--no-remember", default=True, help="Keep the token on disk")
@click.pass_obj
def login(client: ProviquizClient, email: str, password: str, remember: bool):
    """Log in and store the token."""
    try:
        user = client.login(email, password, remember_me=remember)
    except ApiError as e:
        click.echo(f"Login failed: {e.message}", err=True)
        sys.exit(1)
    click.echo(f"Logged in as {user['email']} ({user.get('role', 'student')})")


@cli.command()
@click.pass_obj
def logout(client: ProviquizClient):
    """Forget the stored token."""
    client.logout()
    click.echo("Logged out")


@cli.command("take-exam")
@click.option("--limit", type=int, default=None, help="Number of questions")
@click.option("--minutes", type=int, default=20, show_default=True, help="Time limit")
@click.option("--range-start", type=int, default=None)
@click.option("--range-end", type=int, default=None)
@click.option("--image-filter", type=click.Choice(["all", "images", "text"]), default="all")
@click.pass_obj
def take_exam(
    client: ProviquizClient,
    limit: int | None,
    minutes: int,
    range_start: int | None,
    range_end: int | None,
    image_filter: str,
):
    """Answer a random batch of questions against the clock."""
    try:
        batch = client.start_exam(
            limit=limit, range_start=range_start, range_end=range_end, image_filter=image_filter
        )
    except ApiError as e:
        click.echo(f"Could not start exam: {e.message}", err=True)
        sys.exit(1)

    questions = batch["questions"]
    if not questions:
        click.echo("No questions match these filters.")
        return

    store = ExamStore()
    store.start_exam(questions, duration_seconds=minutes * 60)
    click.echo(f"{len(questions)} of {batch['totalAvailable']} questions, {minutes} minutes.")

    for index, question in enumerate(questions):
        if store.tick():
            click.echo("Time is up.")
            break
        store.go_to_question(index)
        click.echo(f"\n[{index + 1}/{len(questions)}] {question['question']}  ({store.remaining_seconds()}s left)")
        for key, text in question["options"].items():
            if text:
                click.echo(f"  {key}) {text}")
        answer = click.prompt(
            "Answer (a-d, empty to skip)",
            default="",
            show_default=False,
            type=click.Choice(["a", "b", "c", "d", ""], case_sensitive=False),
        )
        # An answer typed after the deadline does not count
        if store.tick():
            click.echo("Time is up.")
            break
        if answer:
            store.select_answer(question["id"], answer.lower())

    if store.status == ExamStatus.IN_PROGRESS:
        store.submit_exam()
    result = store.result
    click.echo(
        f"\nScore: {result.correct_count}/{result.total_questions} "
        f"({result.score_percent:.0f}%) - {'PASS' if result.passed else 'FAIL'}"
    )

    if not client.storage.read_token():
        click.echo("Not logged in; result not saved.")
        return
    try:
        saved = client.submit_exam(store.submission_payload())
    except ApiError as e:
        click.echo(f"Could not save result: {e.message}", err=True)
        sys.exit(1)
    click.echo(f"Saved exam {saved['examId']} (server score {saved['score']}/{saved['totalQuestions']})")


if __name__ == "__main__":
    cli()
