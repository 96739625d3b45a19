# PYTHON_ARGCOMPLETE_OK
"""CLI Main Entry Points

Both commands run the same pipeline:
    collect input -> build request -> call API -> validate -> emit
"""

import json
import sys
import time
from pathlib import Path

from gentools.clipboard import ClipboardWriter, SystemClipboard
from gentools.config import Settings, load_config, resolve_settings
from gentools.errors import ApiError, EmptyInputError, GenError
from gentools.files import sanitize_base_name, save_text
from gentools.git import GitAnalyzer
from gentools.llm import ChatClient, ChatResult, build_request, get_client
from gentools.output import CHECK, Spinner, dim, pretty_json, print_detail, print_error, success
from gentools.prompts import COMMIT_MESSAGE, FILE_NAME, Task

from gentools.cli.args import parse_clipboard_args, parse_commit_args


def generate(payload: str, task: Task, settings: Settings, client: ChatClient, verbose: bool = False) -> ChatResult:
    """Build the request for a task, send it once and return the validated result."""
    request = build_request(payload, task, model=settings.model, temperature=settings.temperature)

    t0 = time.time()
    with Spinner():
        result = client.complete(request)
    elapsed = time.time() - t0

    if verbose:
        _print_verbose_stats(request, result, client, elapsed)
    return result


def _print_verbose_stats(request, result, client, elapsed):
    """Print request and timing statistics to stderr."""
    payload_chars = len(request.messages[-1].content)
    print(dim(f"  Endpoint: {client.name}"), file=sys.stderr)
    print(dim(f"  Model: {request.model} (temperature {request.temperature:g})"), file=sys.stderr)
    if result.model and result.model != request.model:
        print(dim(f"  Answered by: {result.model}"), file=sys.stderr)
    print(dim(f"  Prompt: ~{payload_chars // 4} tokens ({payload_chars} chars)"), file=sys.stderr)
    print(dim(f"  Response: {result.tokens_used} tokens total"), file=sys.stderr)
    print(dim(f"  Elapsed: {elapsed:.2f}s"), file=sys.stderr)


def emit_commit_message(message: str, clipboard: ClipboardWriter) -> None:
    """Print the message unchanged, then copy it to the clipboard."""
    print(message)
    sys.stdout.flush()
    clipboard.write(message)
    if sys.stderr.isatty():
        print(f"{success(CHECK)} Copied to clipboard!", file=sys.stderr)


def emit_text_file(text: str, suggestion: str, directory=".", extension: str = ".txt") -> Path:
    """Save the original text under a name derived from the model's suggestion."""
    base = sanitize_base_name(suggestion)
    path = save_text(text, base, directory=directory, extension=extension)
    print(f"Saved to {path}")
    return path


def _report_error(e: GenError) -> None:
    print_error(str(e))
    if isinstance(e, ApiError):
        print_detail(json.dumps(e.details, indent=2, ensure_ascii=False))
        return
    body = getattr(e, 'body', '')
    if body:
        print_detail(pretty_json(body))


def _run(flow, args) -> int:
    """Run a command flow, turning failures into a diagnostic and exit code."""
    try:
        flow(args)
    except GenError as e:
        _report_error(e)
        return 1
    except OSError as e:
        print_error(f"Could not write file: {e}")
        return 1
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130
    return 0


def _commit_flow(args) -> None:
    config = load_config()
    settings = resolve_settings(config, model=args.model)
    clipboard = SystemClipboard.detect(need_copy=True, need_paste=False)
    diff = GitAnalyzer().get_staged_diff()

    client = get_client(settings.endpoint, settings.api_key, settings.timeout)
    result = generate(diff, COMMIT_MESSAGE, settings, client, verbose=args.verbose)
    emit_commit_message(result.content, clipboard)


def _clipboard_flow(args) -> None:
    config = load_config()
    settings = resolve_settings(config, model=args.model, require_endpoint=True)
    clipboard = SystemClipboard.detect(need_copy=False, need_paste=True)

    text = clipboard.read()
    if not text.strip():
        raise EmptyInputError("Clipboard is empty.")

    client = get_client(settings.endpoint, settings.api_key, settings.timeout)
    result = generate(text, FILE_NAME, settings, client, verbose=args.verbose)
    emit_text_file(text, result.content, extension=settings.extension)


def commit_main(argv: list[str] | None = None) -> int:
    """Entry point for gen-commit-msg."""
    return _run(_commit_flow, parse_commit_args(argv))


def clipboard_main(argv: list[str] | None = None) -> int:
    """Entry point for gen-clipboard-txt."""
    return _run(_clipboard_flow, parse_clipboard_args(argv))
