# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Configuration loading for the control panel.

Settings that locate the panel's data (where the durable store lives,
which key the state is kept under, where exports are written) come from a
YAML file layered over built-in defaults and environment overrides:

  - Built-in defaults
  - Config file (config.yaml)
  - Environment variables, with .env support

Public API:

- load_effective_config: Load and merge the effective configuration

Example:
    Basic usage:

        from controlpanel.config import load_effective_config

        config = load_effective_config()
        print(config["storage"]["directory"])

"""

from .loader import load_effective_config

__all__ = ["load_effective_config"]
