"""
tests/test_templates.py
Unit tests for crudgen.templates (TemplateGenerator).

Tests cover:
- Migration columns, nullability and belongsTo foreign keys
- Model fillable list and relation accessors
- Controller handlers and response envelope
- Store / update request rules
- Resource, routes, factory, seeder and feature test content
- Target paths and the full generate_all pipeline
- Determinism and cross-artifact consistency
"""

from __future__ import annotations

import re
from typing import Dict, List

import pytest

from crudgen.models import FieldSpec, GenerationConfig, RelationSpec, ResourceNames
from crudgen.parser import parse_fields, parse_relations
from crudgen.templates import ARTIFACT_KINDS, TemplateGenerator


def _fillable(model_code: str) -> List[str]:
    match = re.search(r"protected \$fillable = \[(.*?)\];", model_code)
    assert match, f"No fillable list in:\n{model_code}"
    return re.findall(r"'([^']*)'", match.group(1))


def _rule_keys(request_code: str) -> List[str]:
    return re.findall(r"^\s{12}'([^']*)' => '", request_code, flags=re.MULTILINE)


# ===========================================================================
# Migration
# ===========================================================================


class TestMigration:

    def test_columns_in_order(
        self,
        template_gen: TemplateGenerator,
        product_names: ResourceNames,
        product_fields: List[FieldSpec],
    ) -> None:
        code = template_gen.generate_migration(product_names, product_fields, [])
        assert "Schema::create('products', function (Blueprint $table) {" in code
        title_at = code.index("$table->string('title');")
        price_at = code.index("$table->decimal('price')->nullable();")
        assert code.index("$table->id();") < title_at < price_at
        assert price_at < code.index("$table->timestamps();")
        assert "Schema::dropIfExists('products');" in code

    def test_belongs_to_adds_cascading_foreign_key(
        self,
        template_gen: TemplateGenerator,
        category_names: ResourceNames,
        category_fields: List[FieldSpec],
        category_relations: List[RelationSpec],
    ) -> None:
        code = template_gen.generate_migration(
            category_names, category_fields, category_relations
        )
        assert (
            "$table->foreignId('author_id')->constrained()->onDelete('cascade');"
            in code
        )
        # hasMany adds nothing to this table
        assert "post_id" not in code

    def test_unknown_type_emitted_verbatim(
        self, template_gen: TemplateGenerator, product_names: ResourceNames
    ) -> None:
        code = template_gen.generate_migration(
            product_names, parse_fields("token:uuid"), []
        )
        assert "$table->uuid('token');" in code

    def test_missing_relation_target_renders_blank(
        self, template_gen: TemplateGenerator, product_names: ResourceNames
    ) -> None:
        code = template_gen.generate_migration(
            product_names, [], parse_relations("belongsTo")
        )
        assert "$table->foreignId('_id')" in code


# ===========================================================================
# Model
# ===========================================================================


class TestModel:

    def test_class_and_fillable(
        self,
        template_gen: TemplateGenerator,
        product_names: ResourceNames,
        product_fields: List[FieldSpec],
    ) -> None:
        code = template_gen.generate_model(product_names, product_fields, [])
        assert "namespace App\\Models;" in code
        assert "class Product extends Model" in code
        assert "use HasFactory;" in code
        assert _fillable(code) == ["title", "price"]
        assert "'created_at' => 'datetime'," in code
        assert "'updated_at' => 'datetime'," in code

    def test_foreign_key_not_fillable(
        self,
        template_gen: TemplateGenerator,
        category_names: ResourceNames,
        category_fields: List[FieldSpec],
        category_relations: List[RelationSpec],
    ) -> None:
        code = template_gen.generate_model(
            category_names, category_fields, category_relations
        )
        assert "author_id" not in _fillable(code)
        assert _fillable(code) == ["name", "description", "position"]

    def test_relation_accessors(
        self,
        template_gen: TemplateGenerator,
        category_names: ResourceNames,
        category_fields: List[FieldSpec],
        category_relations: List[RelationSpec],
    ) -> None:
        code = template_gen.generate_model(
            category_names, category_fields, category_relations
        )
        assert "public function author()" in code
        assert "return $this->belongsTo(Author::class);" in code
        assert "public function posts()" in code
        assert "return $this->hasMany(Post::class);" in code

    def test_irregular_has_many_accessor(
        self, template_gen: TemplateGenerator, product_names: ResourceNames
    ) -> None:
        code = template_gen.generate_model(
            product_names, [], parse_relations("hasMany:Category")
        )
        assert "public function categories()" in code

    def test_unknown_relation_skipped(
        self, template_gen: TemplateGenerator, product_names: ResourceNames
    ) -> None:
        code = template_gen.generate_model(
            product_names, [], parse_relations("morphTo:Imageable")
        )
        assert "Imageable" not in code

    def test_empty_fields_give_empty_fillable(
        self, template_gen: TemplateGenerator, product_names: ResourceNames
    ) -> None:
        code = template_gen.generate_model(product_names, [], [])
        assert "protected $fillable = [];" in code


# ===========================================================================
# Controller
# ===========================================================================


class TestController:

    @pytest.fixture()
    def code(self, template_gen: TemplateGenerator, product_names: ResourceNames) -> str:
        return template_gen.generate_controller(product_names)

    def test_namespace_and_imports(self, code: str) -> None:
        assert "namespace App\\Http\\Controllers\\Api;" in code
        assert "use App\\Models\\Product;" in code
        assert "use App\\Http\\Requests\\Product\\StoreProductRequest;" in code
        assert "use App\\Http\\Requests\\Product\\UpdateProductRequest;" in code
        assert "use App\\Http\\Resources\\ProductResource;" in code
        assert "class ProductController extends Controller" in code

    @pytest.mark.parametrize(
        "signature",
        [
            "public function index(Request $request): JsonResponse",
            "public function store(StoreProductRequest $request): JsonResponse",
            "public function show(Product $product): JsonResponse",
            "public function update(UpdateProductRequest $request, Product $product): JsonResponse",
            "public function destroy(Product $product): JsonResponse",
        ],
    )
    def test_handlers(self, code: str, signature: str) -> None:
        assert signature in code

    def test_index_query_parameters(self, code: str) -> None:
        assert "$products = Product::query()" in code
        assert "$request->search" in code
        assert "$request->sort_by" in code
        assert "use ($request)" in code
        assert "$request->sort_direction ?? 'asc'" in code
        assert "->paginate($request->per_page ?? 15);" in code

    def test_envelope(self, code: str) -> None:
        assert code.count("'success' => true,") == 5
        assert "'meta' => [" in code
        for key in ("current_page", "last_page", "per_page", "total"):
            assert f"'{key}' =>" in code
        assert "'message' => 'Product created successfully'," in code
        assert "'message' => 'Product updated successfully'," in code
        assert "'message' => 'Product deleted successfully'," in code

    def test_store_returns_201(self, code: str) -> None:
        assert "], 201);" in code
        assert "$product = Product::create($request->validated());" in code


# ===========================================================================
# Form requests
# ===========================================================================


class TestRequests:

    def test_store_rules(
        self,
        template_gen: TemplateGenerator,
        product_names: ResourceNames,
        product_fields: List[FieldSpec],
    ) -> None:
        code = template_gen.generate_store_request(product_names, product_fields)
        assert "namespace App\\Http\\Requests\\Product;" in code
        assert "class StoreProductRequest extends FormRequest" in code
        assert "'title' => 'required|string|max:255'," in code
        assert "'price' => 'nullable|numeric'," in code
        assert "public function messages()" in code
        assert "return true;" in code

    def test_update_rules(
        self,
        template_gen: TemplateGenerator,
        product_names: ResourceNames,
        product_fields: List[FieldSpec],
    ) -> None:
        code = template_gen.generate_update_request(product_names, product_fields)
        assert "class UpdateProductRequest extends FormRequest" in code
        assert "'title' => 'sometimes|string|max:255'," in code
        assert "'price' => 'sometimes|numeric'," in code
        assert "messages()" not in code

    def test_foreign_key_not_validated(
        self,
        template_gen: TemplateGenerator,
        category_names: ResourceNames,
        category_fields: List[FieldSpec],
    ) -> None:
        store = template_gen.generate_store_request(category_names, category_fields)
        update = template_gen.generate_update_request(category_names, category_fields)
        assert "author_id" not in store
        assert "author_id" not in update


# ===========================================================================
# Resource, routes, factory, seeder
# ===========================================================================


class TestSupportingArtifacts:

    def test_resource(
        self, template_gen: TemplateGenerator, product_names: ResourceNames
    ) -> None:
        code = template_gen.generate_resource(product_names)
        assert "class ProductResource extends JsonResource" in code
        assert "'id' => $this->id," in code
        assert "// Add your fields here" in code
        assert "'created_at' => $this->created_at," in code

    def test_routes(
        self, template_gen: TemplateGenerator, product_names: ResourceNames
    ) -> None:
        code = template_gen.generate_routes(product_names)
        assert "use App\\Http\\Controllers\\Api\\ProductController;" in code
        assert "Route::apiResource('products', ProductController::class);" in code
        assert "// Route::get('products/search'" in code
        assert "// Route::post('products/bulk-delete'" in code

    def test_routes_use_kebab_segment(self, template_gen: TemplateGenerator) -> None:
        code = template_gen.generate_routes(ResourceNames.from_name("BlogPost"))
        assert "Route::apiResource('blog-posts', BlogPostController::class);" in code

    def test_factory(self, template_gen: TemplateGenerator, product_names: ResourceNames) -> None:
        fields = parse_fields("title,price:decimal,contact_email,is_active:boolean")
        code = template_gen.generate_factory(product_names, fields)
        assert "class ProductFactory extends Factory" in code
        assert "protected $model = Product::class;" in code
        assert "'title' => fake()->word()," in code
        assert "'price' => fake()->randomFloat(2, 0, 1000)," in code
        assert "'contact_email' => fake()->email()," in code
        assert "'is_active' => fake()->boolean()," in code

    def test_seeder(self, template_gen: TemplateGenerator, product_names: ResourceNames) -> None:
        code = template_gen.generate_seeder(product_names)
        assert "class ProductSeeder extends Seeder" in code
        assert "Product::factory()->count(50)->create();" in code


# ===========================================================================
# Feature test
# ===========================================================================


class TestFeatureTest:

    @pytest.fixture()
    def code(self, template_gen: TemplateGenerator, product_names: ResourceNames) -> str:
        return template_gen.generate_test(product_names)

    def test_five_tests(self, code: str) -> None:
        for method in (
            "test_can_list_products",
            "test_can_create_product",
            "test_can_show_product",
            "test_can_update_product",
            "test_can_delete_product",
        ):
            assert f"public function {method}()" in code
        assert code.count("public function test_") == 5

    def test_statuses(self, code: str) -> None:
        assert code.count("->assertStatus(200)") == 4
        assert code.count("->assertStatus(201)") == 1

    def test_urls_and_tables(self, code: str) -> None:
        assert "$this->getJson('/api/products');" in code
        assert "$this->postJson('/api/products', $data);" in code
        assert '$this->getJson("/api/products/{$product->id}");' in code
        assert "$this->assertDatabaseHas('products', $data);" in code
        assert "$this->assertDatabaseMissing('products', ['id' => $product->id]);" in code

    def test_compound_name_uses_table_not_route(self, template_gen: TemplateGenerator) -> None:
        code = template_gen.generate_test(ResourceNames.from_name("BlogPost"))
        assert "'/api/blog-posts'" in code
        assert "assertDatabaseMissing('blog_posts'" in code
        assert "public function test_can_list_blogPosts()" in code

    def test_custom_api_prefix(self, product_names: ResourceNames) -> None:
        gen = TemplateGenerator(GenerationConfig(api_prefix="api/v1/"))
        code = gen.generate_test(product_names)
        assert "$this->getJson('/api/v1/products');" in code

    def test_namespace(self, code: str) -> None:
        assert "namespace Tests\\Feature\\Product;" in code
        assert "class ProductApiTest extends TestCase" in code
        assert "use RefreshDatabase;" in code


# ===========================================================================
# Paths & generate_all
# ===========================================================================


class TestGenerateAll:

    def test_paths(
        self,
        template_gen: TemplateGenerator,
        product_names: ResourceNames,
        product_fields: List[FieldSpec],
        fixed_timestamp: str,
    ) -> None:
        artifacts = template_gen.generate_all(product_names, product_fields, [])
        paths: Dict[str, str] = {a.kind: a.path for a in artifacts}
        assert paths == {
            "migration": f"database/migrations/{fixed_timestamp}_create_products_table.php",
            "model": "app/Models/Product.php",
            "controller": "app/Http/Controllers/Api/ProductController.php",
            "store_request": "app/Http/Requests/Product/StoreProductRequest.php",
            "update_request": "app/Http/Requests/Product/UpdateProductRequest.php",
            "resource": "app/Http/Resources/ProductResource.php",
            "routes": "routes/api/Product.php",
            "factory": "database/factories/ProductFactory.php",
            "seeder": "database/seeders/ProductSeeder.php",
            "test": "tests/Feature/Product/ProductApiTest.php",
        }

    def test_order_and_count(
        self,
        template_gen: TemplateGenerator,
        product_names: ResourceNames,
        product_fields: List[FieldSpec],
    ) -> None:
        artifacts = template_gen.generate_all(product_names, product_fields, [])
        assert tuple(a.kind for a in artifacts) == ARTIFACT_KINDS
        assert all(a.content.startswith("<?php\n") for a in artifacts)
        assert all(a.content.endswith("\n") for a in artifacts)

    def test_explicit_timestamp_wins(
        self, template_gen: TemplateGenerator, product_names: ResourceNames
    ) -> None:
        artifacts = template_gen.generate_all(
            product_names, [], [], timestamp="2030_12_31_235959"
        )
        assert artifacts[0].path.startswith("database/migrations/2030_12_31_235959_")

    def test_current_time_used_without_config(self, product_names: ResourceNames) -> None:
        artifacts = TemplateGenerator().generate_all(product_names, [], [])
        assert re.match(
            r"^database/migrations/\d{4}_\d{2}_\d{2}_\d{6}_create_products_table\.php$",
            artifacts[0].path,
        )

    def test_custom_directories(self, product_names: ResourceNames) -> None:
        gen = TemplateGenerator(GenerationConfig(app_dir="src", routes_dir="routes/modules"))
        paths = {a.kind: a.path for a in gen.generate_all(product_names, [], [])}
        assert paths["model"] == "src/Models/Product.php"
        assert paths["routes"] == "routes/modules/Product.php"

    def test_deterministic(
        self,
        config: GenerationConfig,
        category_names: ResourceNames,
        category_fields: List[FieldSpec],
        category_relations: List[RelationSpec],
    ) -> None:
        first = TemplateGenerator(config).generate_all(
            category_names, category_fields, category_relations
        )
        second = TemplateGenerator(config).generate_all(
            category_names, category_fields, category_relations
        )
        assert [a.content for a in first] == [a.content for a in second]
        assert [a.path for a in first] == [a.path for a in second]

    def test_fields_agree_across_artifacts(
        self,
        template_gen: TemplateGenerator,
        category_names: ResourceNames,
        category_fields: List[FieldSpec],
        category_relations: List[RelationSpec],
    ) -> None:
        artifacts = {
            a.kind: a.content
            for a in template_gen.generate_all(
                category_names, category_fields, category_relations
            )
        }
        expected = [f.name for f in category_fields]
        assert _fillable(artifacts["model"]) == expected
        assert _rule_keys(artifacts["store_request"]) == expected
        assert _rule_keys(artifacts["update_request"]) == expected
        for name in expected:
            assert f"('{name}')" in artifacts["migration"]
            assert f"'{name}' => fake()" in artifacts["factory"]

    def test_names_agree_across_artifacts(
        self,
        template_gen: TemplateGenerator,
        category_names: ResourceNames,
    ) -> None:
        artifacts = {
            a.kind: a.content for a in template_gen.generate_all(category_names, [], [])
        }
        assert "Schema::create('categories'" in artifacts["migration"]
        assert "Route::apiResource('categories'" in artifacts["routes"]
        assert "'/api/categories'" in artifacts["test"]
        assert "assertDatabaseHas('categories'" in artifacts["test"]
        assert "$categories = Category::query()" in artifacts["controller"]
