"""Pipeline stages: conversion, grouping and splitting."""

from anime_series.stages.base import StageResult
from anime_series.stages.conversion import convert_csv_files
from anime_series.stages.grouping import run_grouping
from anime_series.stages.splitting import run_splitting

__all__ = [
    "StageResult",
    "convert_csv_files",
    "run_grouping",
    "run_splitting",
]
