import logging
import platform
from pathlib import Path
from typing import Any

import click
import yaml

from ._report_context import dump_data, generate_timestamps, get_jinja_env, vm_kwargs, write_report
from .collection.acquire import acquire_document, run_collection_tool
from .collection.device_identity import lookup_device_enrollment_id
from .collection.docs import build_docs_linker
from .collection.reader import load_document
from .config import ReporterConfig, load_config
from .csv_definitions import csv_rows, get_definitions
from .csv_export import export_csv as export_csv_fn
from .exceptions import MdmReporterError
from .models.mdm import MdmPolicyReportModel
from .normalization.assembler import RunContext
from .normalization.mdm import flatten_report, normalize_mdm_diag
from .view_models.policy import build_policy_report_view, group_policy_records

logger = logging.getLogger("mdm_reporter")


# ---------------------------------------------------------------------------
# Shared pipeline
# ---------------------------------------------------------------------------


def _fail(exc: MdmReporterError) -> None:
    click.echo(f"ERROR: {exc}", err=True)
    raise SystemExit(1)


def _build_context(config: ReporterConfig, device_enrollment_id: str | None, docs_urls: bool) -> RunContext:
    """Resolve the run-wide facts once: device enrollment id and docs reachability."""
    enrollment_id = device_enrollment_id or lookup_device_enrollment_id(config)
    linker = build_docs_linker(config) if docs_urls else None
    if docs_urls and linker is None:
        click.echo("Warning: documentation host unreachable; URLs will be omitted.", err=True)
    return RunContext(
        device_enrollment_id=enrollment_id,
        docs_linker=linker,
        primary_label=config.primary_channel_label,
        excluded_namespaces=config.excluded_namespaces,
    )


def _run_engine(
    config: ReporterConfig,
    input_file: str | None,
    device_enrollment_id: str | None,
    docs_urls: bool,
) -> MdmPolicyReportModel:
    document_path = acquire_document(input_file, config)
    root = load_document(document_path)
    context = _build_context(config, device_enrollment_id, docs_urls)
    return normalize_mdm_diag(root, context, source_document=str(document_path), host=platform.node() or None)


def _flat_output(model: MdmPolicyReportModel, include_enrollment_id: bool, docs_urls: bool, grouped: bool) -> dict[str, Any]:
    data = flatten_report(model, include_enrollment_id=include_enrollment_id, include_docs_url=docs_urls)
    if grouped:
        data["settings"] = group_policy_records(model.settings, include_enrollment_id, docs_urls)
    return data


_input_option = click.option(
    "--input", "-i", "input_file", type=click.Path(dir_okay=False),
    help="Path to MDMDiagReport.xml. Collected with MdmDiagnosticsTool when omitted or missing.",
)
_enrollment_option = click.option(
    "--include-enrollment-id/--no-enrollment-id", default=True, show_default=True,
    help="Include enrollment identifiers in the output.",
)
_docs_option = click.option(
    "--docs-urls/--no-docs-urls", default=False, show_default=True,
    help="Look up documentation URLs for policy areas (network access).",
)
_device_id_option = click.option(
    "--device-enrollment-id", default=None,
    help="Primary-channel enrollment id. Looked up from scheduled tasks when omitted.",
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug-level logging.")
@click.option("--config", "config_file", type=click.Path(dir_okay=False), help="Path to a YAML config file.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_file: str | None) -> None:
    """MDM Reporter: applied policy reports from MDM diagnostic exports."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )
    try:
        ctx.obj = load_config(config_file)
    except MdmReporterError as exc:
        _fail(exc)


# ---------------------------------------------------------------------------
# convert command
# ---------------------------------------------------------------------------

@main.command()
@_input_option
@click.option("--output", "-o", "output_file", type=click.Path(dir_okay=False), help="Write to this file instead of stdout.")
@click.option("--format", "-f", "fmt", type=click.Choice(["yaml", "json"]), default="yaml", show_default=True)
@click.option("--grouped", is_flag=True, default=False, help="Nest settings under their policy area.")
@_enrollment_option
@_docs_option
@_device_id_option
@click.pass_obj
def convert(
    config: ReporterConfig,
    input_file: str | None,
    output_file: str | None,
    fmt: str,
    grouped: bool,
    include_enrollment_id: bool,
    docs_urls: bool,
    device_enrollment_id: str | None,
) -> None:
    """Convert a diagnostic export into normalized policy records."""
    try:
        model = _run_engine(config, input_file, device_enrollment_id, docs_urls)
    except MdmReporterError as exc:
        _fail(exc)
        return

    text = dump_data(_flat_output(model, include_enrollment_id, docs_urls, grouped), fmt)
    if output_file:
        dest = Path(output_file)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(text, encoding="utf-8")
        click.echo(f"Success: {len(model.settings)} setting records written to {dest}")
    else:
        click.echo(text, nl=False)


# ---------------------------------------------------------------------------
# report command
# ---------------------------------------------------------------------------

@main.command()
@_input_option
@click.option("--output-dir", "-o", required=True, type=click.Path(file_okay=False), help="Output directory for the HTML report.")
@click.option("--report-stamp", help="Report timestamp (YYYYMMDD). Defaults to today.")
@click.option("--csv/--no-csv", "export_csv", default=False, help="Also write CSV exports.")
@_enrollment_option
@_docs_option
@_device_id_option
@click.pass_obj
def report(
    config: ReporterConfig,
    input_file: str | None,
    output_dir: str,
    report_stamp: str | None,
    export_csv: bool,
    include_enrollment_id: bool,
    docs_urls: bool,
    device_enrollment_id: str | None,
) -> None:
    """Render an HTML report of applied MDM policies."""
    try:
        model = _run_engine(config, input_file, device_enrollment_id, docs_urls)
    except MdmReporterError as exc:
        _fail(exc)
        return

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    common_vars = generate_timestamps(report_stamp)

    view = build_policy_report_view(
        model,
        include_enrollment_id=include_enrollment_id,
        include_docs_url=docs_urls,
        **vm_kwargs(common_vars),
    )
    tpl = get_jinja_env().get_template("mdm_policy_report.html.j2")
    content = tpl.render(policy_report_view=view, **common_vars)
    dest = write_report(output_path, "mdm_policy_report.html", content, common_vars["report_stamp"])
    click.echo(f"Report: {dest}")

    if export_csv:
        flat = flatten_report(model, include_enrollment_id=include_enrollment_id, include_docs_url=docs_urls)
        for defn in get_definitions():
            rows = csv_rows(flat, defn["data_path"])
            csv_path = export_csv_fn(rows, defn["headers"], output_path / f"{defn['report_name']}.csv", sort_by=defn.get("sort_by"))
            click.echo(f"CSV: {csv_path}")

    click.echo("Done!")


# ---------------------------------------------------------------------------
# collect command
# ---------------------------------------------------------------------------

@main.command()
@click.pass_obj
def collect(config: ReporterConfig) -> None:
    """Run MdmDiagnosticsTool and wait for MDMDiagReport.xml."""
    click.echo(f"Collecting MDM diagnostics into {config.diag_output_dir}...")
    try:
        path = run_collection_tool(config)
    except MdmReporterError as exc:
        _fail(exc)
        return
    click.echo(f"Success: {path}")


# ---------------------------------------------------------------------------
# config command group
# ---------------------------------------------------------------------------

@main.group("config")
def config_group() -> None:
    """Inspect reporter configuration."""


@config_group.command("show")
@click.pass_obj
def config_show(config: ReporterConfig) -> None:
    """Print the effective configuration as YAML."""
    click.echo(yaml.safe_dump(config.model_dump(), default_flow_style=False, sort_keys=False), nl=False)


if __name__ == "__main__":
    main()
