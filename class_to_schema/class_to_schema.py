import json
import logging

import click

from .pipeline import ConfigurationError, SchemaTransformer, SourceOptions, TransformerConfig


@click.command()
@click.option("--name", "-n", "names", multiple=True, type=str, help="Class to transform (repeatable)")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--file-path", default=None, type=str, help="Only consider declarations from this source file")
@click.option("--package", default=None, type=str, help="Look classes up in this external package")
@click.option("--indent", default=2, type=int, show_default=True)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.argument("declarations", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def class_to_schema(names, config, file_path, package, indent, verbose, declarations, output):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if config is not None:
        with open(config) as f:
            config = TransformerConfig.from_dict(json.load(f))
    else:
        config = TransformerConfig()

    options = None
    if file_path is not None or package is not None:
        options = SourceOptions(is_external=package is not None, package_name=package, file_path=file_path)

    try:
        transformer = SchemaTransformer.from_declaration_file(declarations, config)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    try:
        results = transformer.transform_all(list(names) or None, options)
    finally:
        transformer.dispose()

    for result in results.values():
        for warning in result.warnings:
            click.echo(f"warning: {warning}", err=True)

    document = {"components": {"schemas": {name: result.schema.to_dict() for name, result in results.items()}}}
    with open(output, "w") as f:
        json.dump(document, f, indent=indent)
        f.write("\n")
