# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the loader for YAML files."""

import logging
from typing import Any

import yamale
from yamale.schema import Schema
from yaml import YAMLError

from dmcatalog.errors import MalformedDescriptorError
from dmcatalog.filesystem import FileSystem, LocalFileSystem

logger: logging.Logger = logging.getLogger(__name__)


class YamlLoader:
    """The loader for loading yaml content from files."""

    @staticmethod
    def _load_yaml_content(content: str, source: str) -> list:
        """Load yaml content using the yamale library.

        We use the default pyyaml parser for yamale.

        When loading the yaml content, this method reports the location of the error (if any).

        Parameters
        ----------
        content : str
            The yaml content.
        source : str
            The file the content comes from, used in error messages.

        Returns
        -------
        list:
            The yaml content list as returned by yamale.

        Raises
        ------
        MalformedDescriptorError
            If the content is not valid yaml.
        """
        try:
            logger.debug("Loading yaml from %s", source)
            return list(yamale.make_data(content=content))
        except YAMLError as error:
            if hasattr(error, "problem_mark"):
                mark = error.problem_mark
                err_pos = f"{mark.line + 1}:{mark.column + 1}"
                logger.error("Cannot read yaml file %s:%s", source, err_pos)
                raise MalformedDescriptorError(f"Cannot read yaml file {source}:{err_pos}") from error

            logger.error("Cannot read yaml file %s", source)
            raise MalformedDescriptorError(f"Cannot read yaml file {source}") from error

    @classmethod
    def validate_yaml_data(cls, schema: Schema, data: list, source: str) -> None:
        """Validate the data according to the yaml schema using the yamale library.

        Keys missing from the schema are accepted.

        Parameters
        ----------
        schema : Schema
            The yamale schema.
        data : list
            The data loaded by using ``yamale.make_data``.
        source : str
            The file the data comes from, used in error messages.

        Raises
        ------
        MalformedDescriptorError
            If the data does not match the schema.
        """
        try:
            logger.debug("Validate data %s with schema %s.", str(data), str(schema.dict))
            yamale.validate(schema, data, strict=False)
        except yamale.YamaleError as error:
            logger.error("Yaml data validation failed for %s.", source)
            for result in error.results:
                for err_str in result.errors:
                    logger.error("\t%s", err_str)
            raise MalformedDescriptorError(
                f"The yaml content in {source} is invalid according to the schema."
            ) from error

    @classmethod
    def loads(cls, content: str, source: str, schema: Schema | None = None) -> Any:
        """Load and return a Python object from yaml content.

        If ``schema`` is provided, this method will validate the loaded content against the
        schema. Empty content loads as an empty dictionary.

        Parameters
        ----------
        content : str
            The yaml content.
        source : str
            The file the content comes from, used in error messages.
        schema : Schema | None
            The schema to validate the yaml content against (default None).

        Returns
        -------
        Any
            The Python object of the first yaml document.

        Raises
        ------
        MalformedDescriptorError
            If the content is not valid yaml or does not match the schema.
        """
        if not content.strip():
            return {}

        loaded_data = [
            (data if data is not None else {}, path) for data, path in cls._load_yaml_content(content, source)
        ]
        if not loaded_data:
            return {}

        if schema:
            cls.validate_yaml_data(schema, loaded_data, source)

        # yamale.make_data return a list of tuples: (loaded_data, file_path).
        return loaded_data[0][0]

    @classmethod
    def load(cls, path: str, schema: Schema | None = None, fs: FileSystem | None = None) -> Any:
        """Load and return a Python object from a yaml file.

        Parameters
        ----------
        path : str
            The path to the yaml file.
        schema : Schema | None
            The schema to validate the yaml content against (default None).
        fs : FileSystem | None
            The file system to read from, the local one by default.

        Returns
        -------
        Any
            The Python object from the yaml file.

        Raises
        ------
        MalformedDescriptorError
            If the file cannot be read, is not valid yaml or does not match the schema.
        """
        logger.info("Loading yaml content for %s", path)
        fs = fs or LocalFileSystem()
        try:
            content = fs.read_text(path)
        except UnicodeDecodeError as error:
            raise MalformedDescriptorError(f"{path} is not a UTF-8 encoded text file.") from error
        except OSError as error:
            logger.error("Cannot read yaml file %s", path)
            raise MalformedDescriptorError(f"Cannot read yaml file {path}: {error}") from error
        return cls.loads(content, path, schema)
