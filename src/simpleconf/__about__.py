# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

__version__ = "0.1.0"
__app_name__ = "simpleconf"
__app_config_name__ = "simpleconf.toml"
