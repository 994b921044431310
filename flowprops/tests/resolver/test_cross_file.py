# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest

from flowprops.errors import ConversionError, ErrorKind, ResolutionError
from flowprops.options import ModuleResolutionOptions
from flowprops.resolver import FileModuleLoader, ModuleLoadError
from flowprops.test_support import props_text


def _component(props: str, prelude: str = "") -> str:
	return f"{prelude}\nclass Foo extends React.Component {{\n  props: {props};\n}}\n"


IMPORTS = {
	"/src/imports.js": "export class a {}\nexport default class b {}\nexport type T = number;\n",
}


def test_imported_default_class_uses_the_local_name() -> None:
	text = props_text(_component("{x: A}", prelude="import A from './imports';"), files=IMPORTS)
	assert text == "{x: PropTypes.instanceOf(A).isRequired}"


def test_renamed_import_wins_over_the_declared_name() -> None:
	text = props_text(_component("{x: Thing}", prelude="import {a as Thing} from './imports';"), files=IMPORTS)
	assert text == "{x: PropTypes.instanceOf(Thing).isRequired}"


def test_renamed_type_import() -> None:
	text = props_text(_component("{x: N}", prelude="import type {T as N} from './imports.js';"), files=IMPORTS)
	assert text == "{x: PropTypes.number.isRequired}"


def test_default_exported_type_alias() -> None:
	files = {"/src/types.js": "type Base = {a: number};\nexport default Base;\n"}
	text = props_text(_component("Base & {b: string}", prelude="import type Base from './types';"), files=files)
	assert text == "{a: PropTypes.number.isRequired, b: PropTypes.string.isRequired}"


def test_imported_alias_resolves_names_in_its_own_module() -> None:
	files = {
		"/src/types.js": "type Inner = string;\nexport type Outer = {inner: Inner};\n",
	}
	text = props_text(
		_component("{o: Outer}", prelude="import type {Outer} from './types';\ntype Inner = number;"), files=files
	)
	assert text == "{o: PropTypes.shape({inner: PropTypes.string.isRequired}).isRequired}"


def test_reexports_are_followed() -> None:
	files = {
		"/src/second.js": "export {default as B} from './third';\nexport * from './fourth';\n",
		"/src/third.js": "type Hidden = {h: boolean};\nexport default Hidden;\n",
		"/src/fourth/index.js": "export type F = 'f' | 'g';\n",
	}
	text = props_text(
		_component("{b: B, f: F}", prelude="import type {B, F} from './second';"),
		files=files,
	)
	assert text == (
		"{b: PropTypes.shape({h: PropTypes.bool.isRequired}).isRequired, "
		"f: PropTypes.oneOf(['f', 'g']).isRequired}"
	)


def test_class_reached_through_another_file_needs_an_import() -> None:
	files = {
		"/src/types.js": "class Model {}\nexport type Props = {model: Model};\n",
	}
	with pytest.raises(ResolutionError) as excinfo:
		props_text(_component("Props", prelude="import type {Props} from './types';"), files=files)
	assert excinfo.value.kind is ErrorKind.MISSING_REFERENCE
	assert excinfo.value.span.file == "/src/types.js"
	assert "import Model into /src/main.js" in excinfo.value.message


def test_export_of_an_undeclared_name_is_a_missing_reference() -> None:
	files = {"/src/m.js": "export {x as y};\n"}
	with pytest.raises(ResolutionError) as excinfo:
		props_text(_component("{v: y}", prelude="import type {y} from './m';"), files=files)
	assert excinfo.value.kind is ErrorKind.MISSING_REFERENCE
	assert excinfo.value.span.file == "/src/main.js"
	assert "refers to 'x', which is not declared there" in excinfo.value.message


def test_anonymous_default_class_uses_the_import_name() -> None:
	files = {"/src/comp.js": "export default class extends React.Component {}\n"}
	text = props_text(_component("{c: Comp}", prelude="import Comp from './comp';"), files=files)
	assert text == "{c: PropTypes.instanceOf(Comp).isRequired}"


@pytest.mark.parametrize(
	"prelude, kind",
	[
		("import typeof X from './imports';", ErrorKind.TYPEOF_IMPORT_UNSUPPORTED),
		("import * as X from './imports';", ErrorKind.UNSUPPORTED_TYPE_KIND),
		("import {missing as X} from './imports';", ErrorKind.MISSING_REFERENCE),
		("import X from './nowhere';", ErrorKind.MISSING_REFERENCE),
		("import X from 'some-package';", ErrorKind.MISSING_REFERENCE),
	],
)
def test_unresolvable_imports(prelude: str, kind: ErrorKind) -> None:
	with pytest.raises(ConversionError) as excinfo:
		props_text(_component("{x: X}", prelude=prelude), files=IMPORTS)
	assert excinfo.value.kind is kind
	assert excinfo.value.span.file == "/src/main.js"


def test_unparseable_module_is_a_missing_reference() -> None:
	with pytest.raises(ResolutionError) as excinfo:
		props_text(_component("{x: X}", prelude="import X from './broken';"), files={"/src/broken.js": "type = ;"})
	assert "cannot parse" in excinfo.value.message


def test_export_star_cycles_terminate() -> None:
	files = {
		"/src/a.js": "export * from './b';\n",
		"/src/b.js": "export * from './a';\nexport * from './gone';\n",
	}
	with pytest.raises(ResolutionError):
		props_text(_component("{x: X}", prelude="import type {X} from './a';"), files=files)


def test_file_loader_resolves_extensions_and_index_files(tmp_path: Path) -> None:
	(tmp_path / "types.js").write_text("export type A = number;\n")
	(tmp_path / "pkg").mkdir()
	(tmp_path / "pkg" / "index.jsx").write_text("export type B = string;\n")
	importer = str(tmp_path / "main.js")
	loader = FileModuleLoader()
	first = loader.load("./types", importer)
	assert first.file == str((tmp_path / "types.js").resolve())
	assert [e.external for e in first.exports] == ["A"]
	assert loader.load("./types.js", importer) is first
	assert loader.load("./pkg", importer).exports[0].external == "B"


def test_file_loader_honours_configured_extensions(tmp_path: Path) -> None:
	(tmp_path / "types.flow").write_text("export type A = number;\n")
	importer = str(tmp_path / "main.js")
	with pytest.raises(ModuleLoadError):
		FileModuleLoader(ModuleResolutionOptions(extensions=(".js",))).load("./types", importer)
	assert FileModuleLoader().load("./types", importer).exports[0].external == "A"


def test_file_loader_rejects_package_imports(tmp_path: Path) -> None:
	with pytest.raises(ModuleLoadError):
		FileModuleLoader().load("react", str(tmp_path / "main.js"))
