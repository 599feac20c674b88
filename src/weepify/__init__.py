"""Weepify crying session tracker."""
