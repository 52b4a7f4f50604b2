# File: crudgen/templates.py
"""
crudgen - Code Template Engine
================================
Turns a parsed resource request into Laravel source files:

    1. Migration                (database/migrations)
    2. Eloquent model           (app/Models)
    3. API controller           (app/Http/Controllers/Api)
    4. Store / Update requests  (app/Http/Requests/<Name>)
    5. API resource             (app/Http/Resources)
    6. Route file               (routes/api)
    7. Factory                  (database/factories)
    8. Seeder                   (database/seeders)
    9. Feature test             (tests/Feature/<Name>)

Every ``generate_*`` method is a pure function of its arguments and returns
a complete file.  All of them read names from the same ``ResourceNames``
and rules from ``crudgen.rules``, so the field list in the migration, the
model's fillable list and the request rules always agree.

**Performance contract:**
    - All string assembly uses ``List[str]`` + ``"\\n".join()``.
    - Template methods are stateless; same input gives byte-identical output.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional, Sequence, Tuple

from crudgen.models import (
    FieldSpec,
    GenerationConfig,
    RelationSpec,
    RelationType,
    RenderedArtifact,
    ResourceNames,
)
from crudgen.rules import fake_for, store_rule, update_rule
from crudgen.utils import to_camel_case, to_plural

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_INDENT: str = "    "
_DOUBLE_INDENT: str = _INDENT * 2
_TRIPLE_INDENT: str = _INDENT * 3
_QUAD_INDENT: str = _INDENT * 4

PHP_OPEN_TAG: str = "<?php"
DEFAULT_PER_PAGE: int = 15
SEEDER_RECORD_COUNT: int = 50
TIMESTAMP_FORMAT: str = "%Y_%m_%d_%H%M%S"

# Order in which generate_all emits artifacts
ARTIFACT_KINDS: Tuple[str, ...] = (
    "migration",
    "model",
    "controller",
    "store_request",
    "update_request",
    "resource",
    "routes",
    "factory",
    "seeder",
    "test",
)


def _finish(lines: List[str]) -> str:
    """Join template lines into file content with a trailing newline."""
    return "\n".join(lines) + "\n"


def _relation_method_name(relation: RelationSpec) -> str:
    """Accessor name: singular camelCase for belongsTo, plural for hasMany."""
    method: str = to_camel_case(relation.target_model)
    if relation.kind == RelationType.HAS_MANY:
        return to_plural(method)
    return method


# ---------------------------------------------------------------------------
# TemplateGenerator class
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Stateless code-generation engine.

    Each ``generate_*`` method returns one complete file content string.
    ``generate_all`` renders every artifact with its target path.
    """

    def __init__(self, config: Optional[GenerationConfig] = None) -> None:
        self._config: GenerationConfig = config or GenerationConfig()
        logger.debug(
            "TemplateGenerator initialised (api_prefix=%r).",
            self._config.api_prefix,
        )

    # ===================================================================
    # 1. Migration
    # ===================================================================

    def generate_migration(
        self,
        names: ResourceNames,
        fields: Sequence[FieldSpec],
        relations: Sequence[RelationSpec],
    ) -> str:
        """
        Generate an anonymous-class migration creating the resource table.

        ``belongsTo`` relations add a cascading ``foreignId`` column here
        only; it never joins the fillable or validation lists.
        """
        table: str = names.table_name
        lines: List[str] = [
            PHP_OPEN_TAG,
            "",
            r"use Illuminate\Database\Migrations\Migration;",
            r"use Illuminate\Database\Schema\Blueprint;",
            r"use Illuminate\Support\Facades\Schema;",
            "",
            "return new class extends Migration",
            "{",
            f"{_INDENT}public function up()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}Schema::create('{table}', function (Blueprint $table) {{",
            f"{_TRIPLE_INDENT}$table->id();",
        ]

        for field in fields:
            nullable: str = "->nullable()" if field.nullable else ""
            lines.append(
                f"{_TRIPLE_INDENT}$table->{field.type}('{field.name}'){nullable};"
            )

        for relation in relations:
            if relation.kind == RelationType.BELONGS_TO:
                lines.append(
                    f"{_TRIPLE_INDENT}$table->foreignId('{relation.foreign_key}')"
                    "->constrained()->onDelete('cascade');"
                )

        lines.extend([
            f"{_TRIPLE_INDENT}$table->timestamps();",
            f"{_DOUBLE_INDENT}}});",
            f"{_INDENT}}}",
            "",
            f"{_INDENT}public function down()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}Schema::dropIfExists('{table}');",
            f"{_INDENT}}}",
            "};",
        ])
        return _finish(lines)

    # ===================================================================
    # 2. Eloquent Model
    # ===================================================================

    def generate_model(
        self,
        names: ResourceNames,
        fields: Sequence[FieldSpec],
        relations: Sequence[RelationSpec],
    ) -> str:
        """Generate the Eloquent model with fillable list and relation accessors."""
        fillable: str = ", ".join(f"'{field.name}'" for field in fields)

        lines: List[str] = [
            PHP_OPEN_TAG,
            "",
            r"namespace App\Models;",
            "",
            r"use Illuminate\Database\Eloquent\Factories\HasFactory;",
            r"use Illuminate\Database\Eloquent\Model;",
            "",
            f"class {names.class_name} extends Model",
            "{",
            f"{_INDENT}use HasFactory;",
            "",
            f"{_INDENT}protected $fillable = [{fillable}];",
            "",
            f"{_INDENT}protected $casts = [",
            f"{_DOUBLE_INDENT}'created_at' => 'datetime',",
            f"{_DOUBLE_INDENT}'updated_at' => 'datetime',",
            f"{_INDENT}];",
        ]

        for relation in relations:
            kind: Optional[RelationType] = relation.kind
            if kind is None:
                logger.debug("No accessor for unhandled relation %r.", relation)
                continue
            lines.extend([
                "",
                f"{_INDENT}public function {_relation_method_name(relation)}()",
                f"{_INDENT}{{",
                f"{_DOUBLE_INDENT}return $this->{kind.value}({relation.target_model}::class);",
                f"{_INDENT}}}",
            ])

        lines.append("}")
        return _finish(lines)

    # ===================================================================
    # 3. API Controller
    # ===================================================================

    def generate_controller(self, names: ResourceNames) -> str:
        """
        Generate the API controller.

        Every handler answers with the ``{success, data, message, meta}``
        envelope.  ``index`` honours the optional ``search``, ``sort_by``,
        ``sort_direction`` and ``per_page`` query parameters.
        """
        name: str = names.class_name
        var: str = names.camel_singular
        items: str = names.camel_plural

        lines: List[str] = [
            PHP_OPEN_TAG,
            "",
            r"namespace App\Http\Controllers\Api;",
            "",
            r"use App\Http\Controllers\Controller;",
            rf"use App\Models\{name};",
            rf"use App\Http\Requests\{name}\Store{name}Request;",
            rf"use App\Http\Requests\{name}\Update{name}Request;",
            rf"use App\Http\Resources\{name}Resource;",
            r"use Illuminate\Http\Request;",
            r"use Illuminate\Http\JsonResponse;",
            "",
            f"class {name}Controller extends Controller",
            "{",
            # index
            f"{_INDENT}public function index(Request $request): JsonResponse",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}${items} = {name}::query()",
            f"{_TRIPLE_INDENT}->when($request->search, function ($query, $search) {{",
            f"{_QUAD_INDENT}$query->where('name', 'like', \"%{{$search}}%\");",
            f"{_TRIPLE_INDENT}}})",
            f"{_TRIPLE_INDENT}->when($request->sort_by, function ($query, $sortBy) use ($request) {{",
            f"{_QUAD_INDENT}$direction = $request->sort_direction ?? 'asc';",
            f"{_QUAD_INDENT}$query->orderBy($sortBy, $direction);",
            f"{_TRIPLE_INDENT}}})",
            f"{_TRIPLE_INDENT}->paginate($request->per_page ?? {DEFAULT_PER_PAGE});",
            "",
            f"{_DOUBLE_INDENT}return response()->json([",
            f"{_TRIPLE_INDENT}'success' => true,",
            f"{_TRIPLE_INDENT}'data' => {name}Resource::collection(${items}->items()),",
            f"{_TRIPLE_INDENT}'meta' => [",
            f"{_QUAD_INDENT}'current_page' => ${items}->currentPage(),",
            f"{_QUAD_INDENT}'last_page' => ${items}->lastPage(),",
            f"{_QUAD_INDENT}'per_page' => ${items}->perPage(),",
            f"{_QUAD_INDENT}'total' => ${items}->total(),",
            f"{_TRIPLE_INDENT}],",
            f"{_DOUBLE_INDENT}]);",
            f"{_INDENT}}}",
            "",
            # store
            f"{_INDENT}public function store(Store{name}Request $request): JsonResponse",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}${var} = {name}::create($request->validated());",
            "",
            f"{_DOUBLE_INDENT}return response()->json([",
            f"{_TRIPLE_INDENT}'success' => true,",
            f"{_TRIPLE_INDENT}'message' => '{name} created successfully',",
            f"{_TRIPLE_INDENT}'data' => new {name}Resource(${var}),",
            f"{_DOUBLE_INDENT}], 201);",
            f"{_INDENT}}}",
            "",
            # show
            f"{_INDENT}public function show({name} ${var}): JsonResponse",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}return response()->json([",
            f"{_TRIPLE_INDENT}'success' => true,",
            f"{_TRIPLE_INDENT}'data' => new {name}Resource(${var}),",
            f"{_DOUBLE_INDENT}]);",
            f"{_INDENT}}}",
            "",
            # update
            f"{_INDENT}public function update(Update{name}Request $request, {name} ${var}): JsonResponse",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}${var}->update($request->validated());",
            "",
            f"{_DOUBLE_INDENT}return response()->json([",
            f"{_TRIPLE_INDENT}'success' => true,",
            f"{_TRIPLE_INDENT}'message' => '{name} updated successfully',",
            f"{_TRIPLE_INDENT}'data' => new {name}Resource(${var}),",
            f"{_DOUBLE_INDENT}]);",
            f"{_INDENT}}}",
            "",
            # destroy
            f"{_INDENT}public function destroy({name} ${var}): JsonResponse",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}${var}->delete();",
            "",
            f"{_DOUBLE_INDENT}return response()->json([",
            f"{_TRIPLE_INDENT}'success' => true,",
            f"{_TRIPLE_INDENT}'message' => '{name} deleted successfully',",
            f"{_DOUBLE_INDENT}]);",
            f"{_INDENT}}}",
            "}",
        ]
        return _finish(lines)

    # ===================================================================
    # 4. Form Requests
    # ===================================================================

    def _request_header(self, names: ResourceNames, class_name: str) -> List[str]:
        return [
            PHP_OPEN_TAG,
            "",
            rf"namespace App\Http\Requests\{names.class_name};",
            "",
            r"use Illuminate\Foundation\Http\FormRequest;",
            "",
            f"class {class_name} extends FormRequest",
            "{",
            f"{_INDENT}public function authorize()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}return true;",
            f"{_INDENT}}}",
            "",
            f"{_INDENT}public function rules()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}return [",
        ]

    def generate_store_request(
        self, names: ResourceNames, fields: Sequence[FieldSpec]
    ) -> str:
        """Create request: every field ``required|`` unless declared nullable."""
        lines: List[str] = self._request_header(
            names, f"Store{names.class_name}Request"
        )
        for field in fields:
            lines.append(f"{_TRIPLE_INDENT}'{field.name}' => '{store_rule(field)}',")
        lines.extend([
            f"{_DOUBLE_INDENT}];",
            f"{_INDENT}}}",
            "",
            f"{_INDENT}public function messages()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}return [",
            f"{_TRIPLE_INDENT}// Add custom messages here",
            f"{_DOUBLE_INDENT}];",
            f"{_INDENT}}}",
            "}",
        ])
        return _finish(lines)

    def generate_update_request(
        self, names: ResourceNames, fields: Sequence[FieldSpec]
    ) -> str:
        """Update request: every field ``sometimes|``, whatever its nullability."""
        lines: List[str] = self._request_header(
            names, f"Update{names.class_name}Request"
        )
        for field in fields:
            lines.append(f"{_TRIPLE_INDENT}'{field.name}' => '{update_rule(field)}',")
        lines.extend([
            f"{_DOUBLE_INDENT}];",
            f"{_INDENT}}}",
            "}",
        ])
        return _finish(lines)

    # ===================================================================
    # 5. API Resource
    # ===================================================================

    def generate_resource(self, names: ResourceNames) -> str:
        """Only ``id`` and the timestamps are exposed; custom fields are added by hand."""
        lines: List[str] = [
            PHP_OPEN_TAG,
            "",
            r"namespace App\Http\Resources;",
            "",
            r"use Illuminate\Http\Resources\Json\JsonResource;",
            "",
            f"class {names.class_name}Resource extends JsonResource",
            "{",
            f"{_INDENT}public function toArray($request)",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}return [",
            f"{_TRIPLE_INDENT}'id' => $this->id,",
            f"{_TRIPLE_INDENT}// Add your fields here",
            f"{_TRIPLE_INDENT}'created_at' => $this->created_at,",
            f"{_TRIPLE_INDENT}'updated_at' => $this->updated_at,",
            f"{_DOUBLE_INDENT}];",
            f"{_INDENT}}}",
            "}",
        ]
        return _finish(lines)

    # ===================================================================
    # 6. Routes
    # ===================================================================

    def generate_routes(self, names: ResourceNames) -> str:
        name: str = names.class_name
        segment: str = names.route_segment
        lines: List[str] = [
            PHP_OPEN_TAG,
            "",
            rf"use App\Http\Controllers\Api\{name}Controller;",
            r"use Illuminate\Support\Facades\Route;",
            "",
            f"Route::apiResource('{segment}', {name}Controller::class);",
            "",
            "// Additional routes",
            f"// Route::get('{segment}/search', [{name}Controller::class, 'search']);",
            f"// Route::post('{segment}/bulk-delete', [{name}Controller::class, 'bulkDelete']);",
        ]
        return _finish(lines)

    # ===================================================================
    # 7. Factory
    # ===================================================================

    def generate_factory(
        self, names: ResourceNames, fields: Sequence[FieldSpec]
    ) -> str:
        name: str = names.class_name
        lines: List[str] = [
            PHP_OPEN_TAG,
            "",
            r"namespace Database\Factories;",
            "",
            rf"use App\Models\{name};",
            r"use Illuminate\Database\Eloquent\Factories\Factory;",
            "",
            f"class {name}Factory extends Factory",
            "{",
            f"{_INDENT}protected $model = {name}::class;",
            "",
            f"{_INDENT}public function definition()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}return [",
        ]
        for field in fields:
            lines.append(
                f"{_TRIPLE_INDENT}'{field.name}' => {fake_for(field.type, field.name)},"
            )
        lines.extend([
            f"{_DOUBLE_INDENT}];",
            f"{_INDENT}}}",
            "}",
        ])
        return _finish(lines)

    # ===================================================================
    # 8. Seeder
    # ===================================================================

    def generate_seeder(self, names: ResourceNames) -> str:
        name: str = names.class_name
        lines: List[str] = [
            PHP_OPEN_TAG,
            "",
            r"namespace Database\Seeders;",
            "",
            rf"use App\Models\{name};",
            r"use Illuminate\Database\Seeder;",
            "",
            f"class {name}Seeder extends Seeder",
            "{",
            f"{_INDENT}public function run()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}{name}::factory()->count({SEEDER_RECORD_COUNT})->create();",
            f"{_INDENT}}}",
            "}",
        ]
        return _finish(lines)

    # ===================================================================
    # 9. Feature Test
    # ===================================================================

    def generate_test(self, names: ResourceNames) -> str:
        """
        Generate the feature test: list, create (201), show, update, delete.

        The delete test asserts the row is gone from the resource table.
        """
        name: str = names.class_name
        var: str = names.camel_singular
        url: str = f"{self._config.api_prefix}/{names.route_segment}"
        table: str = names.table_name

        lines: List[str] = [
            PHP_OPEN_TAG,
            "",
            rf"namespace Tests\Feature\{name};",
            "",
            rf"use App\Models\{name};",
            r"use Illuminate\Foundation\Testing\RefreshDatabase;",
            r"use Tests\TestCase;",
            "",
            f"class {name}ApiTest extends TestCase",
            "{",
            f"{_INDENT}use RefreshDatabase;",
            "",
            # list
            f"{_INDENT}public function test_can_list_{names.camel_plural}()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}{name}::factory()->count(5)->create();",
            "",
            f"{_DOUBLE_INDENT}$response = $this->getJson('{url}');",
            "",
            f"{_DOUBLE_INDENT}$response->assertStatus(200)",
            f"{_DOUBLE_INDENT}{_INDENT}->assertJsonStructure([",
            f"{_QUAD_INDENT}'success',",
            f"{_QUAD_INDENT}'data' => [",
            f"{_QUAD_INDENT}{_INDENT}'*' => ['id'],",
            f"{_QUAD_INDENT}],",
            f"{_QUAD_INDENT}'meta',",
            f"{_TRIPLE_INDENT}]);",
            f"{_INDENT}}}",
            "",
            # create
            f"{_INDENT}public function test_can_create_{var}()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}$data = {name}::factory()->make()->toArray();",
            "",
            f"{_DOUBLE_INDENT}$response = $this->postJson('{url}', $data);",
            "",
            f"{_DOUBLE_INDENT}$response->assertStatus(201)",
            f"{_DOUBLE_INDENT}{_INDENT}->assertJsonStructure([",
            f"{_QUAD_INDENT}'success',",
            f"{_QUAD_INDENT}'message',",
            f"{_QUAD_INDENT}'data' => ['id'],",
            f"{_TRIPLE_INDENT}]);",
            "",
            f"{_DOUBLE_INDENT}$this->assertDatabaseHas('{table}', $data);",
            f"{_INDENT}}}",
            "",
            # show
            f"{_INDENT}public function test_can_show_{var}()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}${var} = {name}::factory()->create();",
            "",
            f'{_DOUBLE_INDENT}$response = $this->getJson("{url}/{{${var}->id}}");',
            "",
            f"{_DOUBLE_INDENT}$response->assertStatus(200)",
            f"{_DOUBLE_INDENT}{_INDENT}->assertJsonStructure([",
            f"{_QUAD_INDENT}'success',",
            f"{_QUAD_INDENT}'data' => ['id'],",
            f"{_TRIPLE_INDENT}]);",
            f"{_INDENT}}}",
            "",
            # update
            f"{_INDENT}public function test_can_update_{var}()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}${var} = {name}::factory()->create();",
            f"{_DOUBLE_INDENT}$updateData = {name}::factory()->make()->toArray();",
            "",
            f'{_DOUBLE_INDENT}$response = $this->putJson("{url}/{{${var}->id}}", $updateData);',
            "",
            f"{_DOUBLE_INDENT}$response->assertStatus(200)",
            f"{_DOUBLE_INDENT}{_INDENT}->assertJsonStructure([",
            f"{_QUAD_INDENT}'success',",
            f"{_QUAD_INDENT}'message',",
            f"{_QUAD_INDENT}'data' => ['id'],",
            f"{_TRIPLE_INDENT}]);",
            f"{_INDENT}}}",
            "",
            # delete
            f"{_INDENT}public function test_can_delete_{var}()",
            f"{_INDENT}{{",
            f"{_DOUBLE_INDENT}${var} = {name}::factory()->create();",
            "",
            f'{_DOUBLE_INDENT}$response = $this->deleteJson("{url}/{{${var}->id}}");',
            "",
            f"{_DOUBLE_INDENT}$response->assertStatus(200)",
            f"{_DOUBLE_INDENT}{_INDENT}->assertJson([",
            f"{_QUAD_INDENT}'success' => true,",
            f"{_QUAD_INDENT}'message' => '{name} deleted successfully',",
            f"{_TRIPLE_INDENT}]);",
            "",
            f"{_DOUBLE_INDENT}$this->assertDatabaseMissing('{table}', ['id' => ${var}->id]);",
            f"{_INDENT}}}",
            "}",
        ]
        return _finish(lines)

    # ===================================================================
    # 10. Target paths
    # ===================================================================

    def artifact_path(self, kind: str, names: ResourceNames, timestamp: str) -> str:
        """Path of one artifact relative to the application base path."""
        cfg: GenerationConfig = self._config
        name: str = names.class_name
        paths: Dict[str, str] = {
            "migration": (
                f"{cfg.database_dir}/migrations/"
                f"{timestamp}_create_{names.table_name}_table.php"
            ),
            "model": f"{cfg.app_dir}/Models/{name}.php",
            "controller": f"{cfg.app_dir}/Http/Controllers/Api/{name}Controller.php",
            "store_request": f"{cfg.app_dir}/Http/Requests/{name}/Store{name}Request.php",
            "update_request": f"{cfg.app_dir}/Http/Requests/{name}/Update{name}Request.php",
            "resource": f"{cfg.app_dir}/Http/Resources/{name}Resource.php",
            "routes": f"{cfg.routes_dir}/{name}.php",
            "factory": f"{cfg.database_dir}/factories/{name}Factory.php",
            "seeder": f"{cfg.database_dir}/seeders/{name}Seeder.php",
            "test": f"{cfg.tests_dir}/{name}/{name}ApiTest.php",
        }
        return paths[kind]

    def resolve_timestamp(self) -> str:
        """Configured migration timestamp, or the current local time."""
        if self._config.migration_timestamp:
            return self._config.migration_timestamp
        return time.strftime(TIMESTAMP_FORMAT)

    # ===================================================================
    # 11. Aggregate generation
    # ===================================================================

    def generate_all(
        self,
        names: ResourceNames,
        fields: Sequence[FieldSpec],
        relations: Sequence[RelationSpec],
        timestamp: Optional[str] = None,
    ) -> List[RenderedArtifact]:
        """Render every artifact, in ``ARTIFACT_KINDS`` order, with its path."""
        stamp: str = timestamp or self.resolve_timestamp()
        contents: Dict[str, str] = {
            "migration": self.generate_migration(names, fields, relations),
            "model": self.generate_model(names, fields, relations),
            "controller": self.generate_controller(names),
            "store_request": self.generate_store_request(names, fields),
            "update_request": self.generate_update_request(names, fields),
            "resource": self.generate_resource(names),
            "routes": self.generate_routes(names),
            "factory": self.generate_factory(names, fields),
            "seeder": self.generate_seeder(names),
            "test": self.generate_test(names),
        }

        artifacts: List[RenderedArtifact] = [
            RenderedArtifact(
                kind=kind,
                path=self.artifact_path(kind, names, stamp),
                content=contents[kind],
            )
            for kind in ARTIFACT_KINDS
        ]

        logger.info(
            "Rendered %d artifacts for '%s' (~%d lines).",
            len(artifacts),
            names.class_name,
            sum(a.line_count for a in artifacts),
        )
        return artifacts


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TemplateGenerator",
    "ARTIFACT_KINDS",
    "DEFAULT_PER_PAGE",
    "SEEDER_RECORD_COUNT",
]

logger.debug("crudgen.templates loaded.")
