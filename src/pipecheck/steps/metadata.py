"""Metadata units. They document a pipe and are skipped during execution."""

from pipecheck.pipelines.units import BaseMetadata


class DescriptionMetadata(BaseMetadata):
    type = "description"

    def __init__(self, description: str):
        self.description = description


class TitleMetadata(BaseMetadata):
    type = "title"

    def __init__(self, title: str):
        self.title = title


def description(text: str) -> DescriptionMetadata:
    return DescriptionMetadata(text)


def title(text: str) -> TitleMetadata:
    return TitleMetadata(text)
