# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""Bridge between the order event bus and a legacy warehouse management system."""

__version__ = "1.0.0"
