# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This is the main entrypoint to run dmcatalog."""

import argparse
import json
import logging
import os
import sys
from importlib import metadata as importlib_metadata

from dmcatalog.artifact.inspector import inspect_artifact
from dmcatalog.catalog.merger import CliOverrides
from dmcatalog.catalog.packager import write_package
from dmcatalog.config.defaults import create_defaults, load_defaults
from dmcatalog.errors import CatalogError
from dmcatalog.pipeline import resolve_catalog_details

logger: logging.Logger = logging.getLogger(__name__)

#: The name of the catalog details archive written by the ``package`` command.
CATALOG_DETAILS_FILE_NAME = "catalog_details.zip"


def inspect_package(inspect_args: argparse.Namespace) -> int:
    """Print the metadata found inside a package."""
    try:
        metadata = inspect_artifact(inspect_args.artifact_path)
    except CatalogError as error:
        logger.error(error)
        return os.EX_DATAERR

    print(json.dumps(metadata.to_dict(), indent=4))
    return os.EX_OK


def package_catalog_details(package_args: argparse.Namespace) -> int:
    """Resolve the catalog metadata and write the catalog details archive to the output directory."""
    if not (package_args.artifact_path or package_args.catalog_yml):
        logger.error("Please provide the path to a package with `--artifact-path` and/or a `--catalog-yml` file.")
        return os.EX_USAGE

    overrides = CliOverrides(
        source_code_uri=package_args.uri_source_code,
        version=package_args.override_version,
        branch=package_args.branch,
        committer_mail=package_args.committer_mail,
        release_uri=package_args.release_uri,
        catalog_identifier=package_args.catalog_identifier,
    )

    try:
        metadata = resolve_catalog_details(
            artifact_path=package_args.artifact_path,
            manifest_path=package_args.catalog_yml,
            overrides=overrides,
            path_to_readme=package_args.readme,
            path_to_images=package_args.images,
        )
    except CatalogError as error:
        logger.error(error)
        return os.EX_DATAERR

    output_path = os.path.join(package_args.output_dir, CATALOG_DETAILS_FILE_NAME)
    write_package(metadata, output_path)
    logger.info(
        "Catalog details for %s version %s (%s).",
        metadata.name,
        metadata.version.value,
        "pre-release" if metadata.is_pre_release() else "release",
    )
    return os.EX_OK


def perform_action(action_args: argparse.Namespace) -> None:
    """Perform the indicated action of dmcatalog."""
    match action_args.action:
        case "dump-defaults":
            # Create the defaults.ini file in the output dir and exit.
            create_defaults(action_args.output_dir, os.getcwd())
            sys.exit(os.EX_OK)

        case "inspect":
            sys.exit(inspect_package(action_args))

        case "package":
            sys.exit(package_catalog_details(action_args))

        case _:
            logger.error("dmcatalog does not support command option %s.", action_args.action)
            sys.exit(os.EX_USAGE)


def main(argv: list[str] | None = None) -> None:
    """Execute dmcatalog as a standalone command-line tool.

    Parameters
    ----------
    argv: list[str] | None
        Command-line arguments.
        If ``argv`` is ``None``, argparse automatically looks at ``sys.argv``.
        Hence, we set ``argv = None`` by default.
    """
    main_parser = argparse.ArgumentParser(prog="dmcatalog")

    main_parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {importlib_metadata.version('dmcatalog')}",
        help="Show dmcatalog's version number and exit",
    )

    main_parser.add_argument(
        "-v",
        "--verbose",
        help="Run dmcatalog with more debug logs",
        action="store_true",
    )

    main_parser.add_argument(
        "-o",
        "--output-dir",
        default=os.path.join(os.getcwd(), "output"),
        help="The output destination path for dmcatalog",
    )

    main_parser.add_argument(
        "-dp",
        "--defaults-path",
        default="",
        help="The path to the defaults configuration file.",
    )

    # Add sub parsers for each action.
    sub_parser = main_parser.add_subparsers(dest="action", help="Run dmcatalog <action> --help for help")

    # Print the metadata found inside a package.
    inspect_parser = sub_parser.add_parser(name="inspect")

    inspect_parser.add_argument(
        "-a",
        "--artifact-path",
        required=True,
        type=str,
        help="The path to a .dmapp or .dmprotocol file.",
    )

    # Build the catalog details archive.
    package_parser = sub_parser.add_parser(name="package")

    package_parser.add_argument(
        "-a",
        "--artifact-path",
        required=False,
        type=str,
        help="The path to a .dmapp or .dmprotocol file.",
    )

    package_parser.add_argument(
        "-m",
        "--catalog-yml",
        required=False,
        type=str,
        help=(
            "The path to a catalog.yml or manifest.yml file, or to a directory to start looking for one. "
            "Required when no package is given."
        ),
    )

    package_parser.add_argument("--readme", required=False, type=str, help="The path to the README.md file.")
    package_parser.add_argument("--images", required=False, type=str, help="The path to the images directory.")
    package_parser.add_argument(
        "--uri-source-code", required=False, type=str, help="The URI to the source code of the package."
    )
    package_parser.add_argument(
        "--override-version", required=False, type=str, help="The version to use instead of the one of the package."
    )
    package_parser.add_argument("--branch", required=False, type=str, help="The branch the version belongs to.")
    package_parser.add_argument(
        "--committer-mail", required=False, type=str, help="The e-mail address of the author of the version."
    )
    package_parser.add_argument(
        "--release-uri", required=False, type=str, help="The URI to the release notes of the version."
    )
    package_parser.add_argument(
        "--catalog-identifier", required=False, type=str, help="The GUID of the entry in the catalog."
    )

    # Dump the default values.
    sub_parser.add_parser(name="dump-defaults", description="Dumps the defaults.ini file to the output directory.")

    args = main_parser.parse_args(argv)

    if not args.action:
        main_parser.print_help()
        sys.exit(os.EX_USAGE)

    if args.verbose:
        log_level = logging.DEBUG
        log_format = "%(asctime)s [%(name)s:%(funcName)s:%(lineno)d] [%(levelname)s] %(message)s"
    else:
        log_level = logging.INFO
        log_format = "%(asctime)s [%(levelname)s] %(message)s"

    # Set global logging config. We need the stream handler for the initial
    # output directory checking log messages.
    st_handler = logging.StreamHandler(sys.stdout)
    logging.basicConfig(format=log_format, handlers=[st_handler], force=True, level=log_level)

    # Set the output directory.
    if not args.output_dir:
        logger.error("The output path cannot be empty. Exiting ...")
        sys.exit(os.EX_USAGE)

    if os.path.isfile(args.output_dir):
        logger.error("The output directory already exists. Exiting ...")
        sys.exit(os.EX_USAGE)

    if os.path.isdir(args.output_dir):
        logger.info("Setting the output directory to %s", os.path.relpath(args.output_dir, os.getcwd()))
    else:
        logger.info("No directory at %s. Creating one ...", os.path.relpath(args.output_dir, os.getcwd()))
        os.makedirs(args.output_dir)

    # Add file handler to the root logger. Remove stream handler from the
    # root logger to prevent dependencies printing logs to stdout.
    debug_log_path = os.path.join(args.output_dir, "debug.log")
    log_file_handler = logging.FileHandler(debug_log_path, "w")
    log_file_handler.setFormatter(logging.Formatter(log_format))
    logging.getLogger().removeHandler(st_handler)
    logging.getLogger().addHandler(log_file_handler)

    # Add StreamHandler to the dmcatalog logger only.
    dmcatalog_logger = logging.getLogger("dmcatalog")
    dmcatalog_logger.addHandler(st_handler)

    logger.info("The logs will be stored in debug.log")

    # Load the default values from defaults.ini files.
    if not load_defaults(args.defaults_path):
        logger.error("Exiting because the defaults configuration could not be loaded.")
        sys.exit(os.EX_NOINPUT)

    perform_action(args)


if __name__ == "__main__":
    main()
