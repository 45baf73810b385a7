"""
Tests for chat requirement parsing, filtering and price ranking.

Validates the compact requirement grammar, operator semantics, the
price estimate, ranking order and hot-first selection.
"""

import pytest

from model_catalog.errors import NoOnlineModelError, RequirementSyntaxError
from model_catalog.registry.requirements import (
    ChatModelRequirements,
    Condition,
    Op,
    parse_condition,
)
from model_catalog.registry.selection import (
    DEFAULT_COST_PER_MILLION,
    estimate_price,
    filter_chat_specs,
    get_first_online_chat_client,
    parse_requirement_string,
    parse_requirements,
)


@pytest.fixture
def catalog(chat_registry, chat_spec):
    """
    Chat registry with three priced models.

    Prices at the default 10k context:
        cheap:   10000 * 0.1 + 1000 * 0.4  = 1400
        mid:     10000 * 2   + 1000 * 8    = 28000
        premium: 10000 * 10  + 1000 * 40   = 140000
    """
    chat_registry.register_all(
        [
            chat_spec(
                "premium",
                provider="OpenAI",
                cost_per_million_input_tokens=10,
                cost_per_million_output_tokens=40,
                intelligence=6,
                speed=2,
                context_length=200000,
            ),
            chat_spec(
                "cheap",
                provider="Groq",
                cost_per_million_input_tokens=0.1,
                cost_per_million_output_tokens=0.4,
                intelligence=2,
                speed=5,
                context_length=131072,
            ),
            chat_spec(
                "mid",
                provider="OpenAI",
                cost_per_million_input_tokens=2,
                cost_per_million_output_tokens=8,
                intelligence=5,
                speed=3,
                context_length=1000000,
            ),
        ]
    )
    return chat_registry


class TestConditionParsing:
    """Operator prefixes on requirement values."""

    @pytest.mark.parametrize(
        "raw,op,value",
        [
            ("5", Op.EQ, "5"),
            ("=5", Op.EQ, "5"),
            (">5", Op.GT, "5"),
            ("<5", Op.LT, "5"),
            (">=5", Op.GTE, "5"),
            ("<=5", Op.LTE, "5"),
        ],
    )
    def test_operators(self, raw, op, value):
        """Each operator prefix is parsed."""
        assert parse_condition(raw) == Condition(op, value)

    def test_numbers_and_bools_are_equality(self):
        """Numbers and booleans become equality conditions."""
        assert parse_condition(3) == Condition(Op.EQ, 3.0)
        assert parse_condition(True) == Condition(Op.EQ, True)

    @pytest.mark.parametrize("raw", ["=>5", "<>5", ">>1"])
    def test_unknown_operator(self, raw):
        """Unrecognized operators raise."""
        with pytest.raises(RequirementSyntaxError, match="Unknown operator"):
            parse_condition(raw)

    def test_missing_value(self):
        """An operator without a value raises."""
        with pytest.raises(RequirementSyntaxError):
            parse_condition(">=")

    def test_numeric_comparison(self):
        """Numeric conditions compare as numbers."""
        assert Condition(Op.GTE, "4").matches(4)
        assert not Condition(Op.GT, "4").matches(4)
        assert Condition(Op.LT, "4").matches(3.5)

    def test_missing_attribute_never_matches(self):
        """A None attribute never matches."""
        assert not Condition(Op.GTE, "0").matches(None)

    def test_non_numeric_value_against_number(self):
        """A text value against a number raises."""
        with pytest.raises(RequirementSyntaxError):
            Condition(Op.GT, "fast").matches(3)

    def test_ordering_operator_on_string(self):
        """Ordering operators on text raise."""
        with pytest.raises(RequirementSyntaxError):
            Condition(Op.GT, "a").matches("b")


class TestRequirementParsing:
    """Structured and compact requirement forms."""

    def test_compact_string(self, catalog):
        """The compact form yields provider and conditions."""
        parsed = parse_requirement_string("auto:intelligence>=4,speed>2", catalog)

        assert parsed.provider == Condition(Op.EQ, "auto")
        assert parsed.intelligence == Condition(Op.GTE, "4")
        assert parsed.speed == Condition(Op.GT, "2")

    def test_camel_case_keys(self, catalog):
        """camelCase keys are accepted."""
        parsed = parse_requirement_string("OpenAI:contextLength>=500000", catalog)
        assert parsed.context_length == Condition(Op.GTE, "500000")

    def test_registered_key_is_name_shortcut(self, catalog):
        """A registered key is a name requirement."""
        parsed = parse_requirement_string("groq:cheap", catalog)
        assert parsed.conditions() == {"name": Condition(Op.EQ, "groq:cheap")}

    def test_string_without_filters_is_a_name(self, catalog):
        """A string without filters is a name."""
        parsed = parse_requirement_string("nothing-here", catalog)
        assert parsed.name == Condition(Op.EQ, "nothing-here")

    def test_filter_without_operator(self, catalog):
        """A filter without an operator raises."""
        with pytest.raises(RequirementSyntaxError):
            parse_requirement_string("auto:intelligence", catalog)

    def test_unknown_requirement_key(self, catalog):
        """Unknown requirement keys raise."""
        with pytest.raises(RequirementSyntaxError):
            parse_requirement_string("auto:colour=red", catalog)

    def test_auto_provider_dropped(self, catalog):
        """The auto provider means no constraint."""
        parsed = parse_requirements("auto:speed>=3", catalog)
        assert parsed.provider is None

    def test_mapping_input(self, catalog):
        """Mappings are parsed into conditions."""
        parsed = parse_requirements({"contextLength": ">=100000", "tools": 3}, catalog)
        assert parsed.context_length == Condition(Op.GTE, "100000")
        assert parsed.tools == Condition(Op.EQ, 3.0)

    def test_model_input_passthrough(self, catalog):
        """A requirements object is used as is."""
        requirements = ChatModelRequirements(speed=">=4")
        assert parse_requirements(requirements, catalog) is requirements


class TestRequirementValidation:
    """Malformed conditions fail regardless of what is registered."""

    def test_non_numeric_value_with_empty_registry(self, chat_registry):
        """A text value on a numeric field raises with nothing registered."""
        with pytest.raises(RequirementSyntaxError):
            filter_chat_specs(chat_registry, "auto:intelligence>abc")

    def test_non_numeric_value_when_attribute_missing(self, chat_registry, chat_spec):
        """A text value raises even when no model has the attribute."""
        chat_registry.register(chat_spec("unscored"))

        with pytest.raises(RequirementSyntaxError):
            filter_chat_specs(chat_registry, "auto:intelligence>abc")

    def test_bad_condition_after_failing_condition(self, catalog):
        """Every condition is checked, not just the first failing one."""
        with pytest.raises(RequirementSyntaxError):
            filter_chat_specs(catalog, "auto:intelligence>100,speed>=fast")

    @pytest.mark.parametrize("requirements", ["openai:name>a", ">openai:speed>=1"])
    def test_ordering_operator_on_identity_field(self, chat_registry, requirements):
        """Name and provider accept equality only."""
        with pytest.raises(RequirementSyntaxError, match="not supported"):
            filter_chat_specs(chat_registry, requirements)

    def test_provider_display_name_ordering_rejected(self, chat_registry):
        """providerDisplayName accepts equality only."""
        with pytest.raises(RequirementSyntaxError):
            filter_chat_specs(chat_registry, {"providerDisplayName": "<OpenAI"})

    def test_mapping_with_non_numeric_value(self, chat_registry):
        """Mapping input is validated the same way."""
        with pytest.raises(RequirementSyntaxError):
            parse_requirements({"contextLength": ">=lots"}, chat_registry)


class TestPriceEstimate:
    """Fixed price formula used for ranking."""

    def test_formula_with_declared_costs(self, chat_spec):
        """The estimate follows the fixed formula."""
        spec = chat_spec("m", cost_per_million_input_tokens=2, cost_per_million_output_tokens=8)

        assert estimate_price(spec) == 10000 * 2 + 1000 * 8
        assert estimate_price(spec, 100000) == 100000 * 2 + 1000 * 8

    def test_small_context_floors_at_minimum(self, chat_spec):
        """Context below 10000 tokens is priced as 10000."""
        spec = chat_spec("m", cost_per_million_input_tokens=1, cost_per_million_output_tokens=1)
        assert estimate_price(spec, 10) == estimate_price(spec, 10000)

    def test_undeclared_costs_use_default(self, chat_spec):
        """Undeclared costs use the default rate."""
        spec = chat_spec("m")
        assert estimate_price(spec) == (10000 + 1000) * DEFAULT_COST_PER_MILLION

    def test_zero_cost_is_not_default(self, chat_spec):
        """A zero cost is kept as zero."""
        spec = chat_spec("m", cost_per_million_input_tokens=0, cost_per_million_output_tokens=0)
        assert estimate_price(spec) == 0


class TestFiltering:
    """Filtering and ascending price order."""

    def test_ranked_cheapest_first(self, catalog):
        """Matches are ranked cheapest first."""
        ranked = filter_chat_specs(catalog, "auto:intelligence>=0")
        assert [spec.model_id for spec in ranked] == ["cheap", "mid", "premium"]

    def test_conditions_all_apply(self, catalog):
        """All conditions must hold."""
        ranked = filter_chat_specs(catalog, "auto:intelligence>=5,speed>=3")
        assert [spec.model_id for spec in ranked] == ["mid"]

    def test_provider_is_case_insensitive(self, catalog):
        """Provider matching ignores case."""
        ranked = filter_chat_specs(catalog, "openai:intelligence>0")
        assert [spec.model_id for spec in ranked] == ["mid", "premium"]

    def test_context_length_filters_and_reprices(self, catalog):
        """Context length filters and feeds the estimate."""
        ranked = filter_chat_specs(catalog, {"contextLength": ">=150000"})
        assert [spec.model_id for spec in ranked] == ["mid", "premium"]

    def test_name_shortcut(self, catalog):
        """A registered key selects that model only."""
        ranked = filter_chat_specs(catalog, "OpenAI:premium")
        assert [spec.model_id for spec in ranked] == ["premium"]

    def test_missing_attribute_excludes_model(self, catalog, chat_spec):
        """Models without the attribute are excluded."""
        catalog.register(chat_spec("unscored", cost_per_million_input_tokens=0))
        ranked = filter_chat_specs(catalog, "auto:research>=0")
        assert ranked == []

    def test_ties_keep_registration_order(self, chat_registry, chat_spec):
        """Equal prices keep registration order."""
        chat_registry.register_all([chat_spec("first"), chat_spec("second")])
        ranked = filter_chat_specs(chat_registry, {})
        assert [spec.model_id for spec in ranked] == ["first", "second"]


class TestSelection:
    """Hot-first selection in price order."""

    @pytest.mark.asyncio
    async def test_cheapest_online_selected(self, catalog):
        """The cheapest online model is selected."""
        client = await get_first_online_chat_client(catalog, "auto:intelligence>=0")
        assert client.model_spec.model_id == "cheap"

    @pytest.mark.asyncio
    async def test_hot_preferred_over_cheaper_cold(self, chat_registry, chat_spec):
        """A hot model beats a cheaper cold one."""
        chat_registry.register_all(
            [
                chat_spec("cold-cheap", hot=False, cost_per_million_input_tokens=0.1),
                chat_spec("hot-pricey", cost_per_million_input_tokens=5),
            ]
        )

        client = await get_first_online_chat_client(chat_registry, {})

        assert client.model_spec.model_id == "hot-pricey"

    @pytest.mark.asyncio
    async def test_cheapest_cold_when_nothing_hot(self, chat_registry, chat_spec):
        """The cheapest cold model is used when none is hot."""
        chat_registry.register_all(
            [
                chat_spec("cold-pricey", hot=False, cost_per_million_input_tokens=5),
                chat_spec("cold-cheap", hot=False, cost_per_million_input_tokens=0.1),
                chat_spec("offline", available=False, cost_per_million_input_tokens=0),
            ]
        )

        client = await get_first_online_chat_client(chat_registry, {})

        assert client.model_spec.model_id == "cold-cheap"

    @pytest.mark.asyncio
    async def test_no_online_model(self, chat_registry, chat_spec):
        """All matches offline raises NoOnlineModelError."""
        chat_registry.register_all([chat_spec("down", available=False)])

        with pytest.raises(NoOnlineModelError, match="No online model found"):
            await get_first_online_chat_client(chat_registry, {})

    @pytest.mark.asyncio
    async def test_no_matching_model(self, catalog):
        """No matches raises NoOnlineModelError."""
        with pytest.raises(NoOnlineModelError):
            await get_first_online_chat_client(catalog, "auto:intelligence>100")
