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

"""Durable storage for the control panel.

The panel persists its whole state as one value under one key. This
package provides the key-value protocol the state store writes through and
the backends that implement it.

Public API:

- KeyValueStore: Protocol for whole-value get/put/delete
- FileKeyValueStore: One JSON file per key, atomic replace on write
- MemoryKeyValueStore: Dict-backed store for tests

"""

from .backends import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = ["KeyValueStore", "FileKeyValueStore", "MemoryKeyValueStore"]
