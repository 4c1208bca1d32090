"""Prompt templates for the default report sections.

Templates are rendered with str.format; literal JSON braces are doubled.
Available placeholders: {business_details} plus every AnalysisInput field.
"""

JSON_RULES = """IMPORTANT INSTRUCTIONS:
1. Return ONLY a clean, parsable JSON object
2. Do NOT include explanations, markdown or commentary outside the JSON
3. Match the schema below exactly; use snake_case keys"""


EXECUTIVE_SUMMARY = """You are a seasoned venture capital analyst evaluating an early-stage startup.
Write a structured executive summary that objectively analyzes the business potential.

""" + JSON_RULES + """

Required JSON structure:
{{
  "title": "3-12 word descriptive project title",
  "verdict": "positive" | "negative" | "neutral",
  "score": 0-100 integer,
  "summary": "150-300 word analysis paragraph",
  "key_findings": [
    {{"type": "strength" | "weakness" | "opportunity" | "threat", "text": "15-50 words"}}
  ]
}}

Business details:
{business_details}
"""


MARKET_SIZE_GROWTH = """You are a market research analyst. Estimate the market size and growth
for the business below using current, citable market data.

""" + JSON_RULES + """

Required JSON structure:
{{
  "total_addressable_market": {{"size": "", "description": "", "methodology": ""}},
  "serviceable_addressable_market": {{"size": "", "description": "", "methodology": ""}},
  "serviceable_obtainable_market": {{"size": "", "description": "", "methodology": ""}},
  "growth_rate": {{"current": "", "projected": "", "factors": [""]}},
  "market_trends": [
    {{"trend": "", "description": "", "impact": "", "timeframe": ""}}
  ]
}}

Business details:
{business_details}
"""


TARGET_USERS = """You are a product strategist. Identify the target users for the business below.

""" + JSON_RULES + """

Required JSON structure:
{{
  "primary_user_personas": [
    {{"name": "", "description": "", "pain_points": [""], "needs": [""], "behaviors": [""]}}
  ],
  "user_segments": [{{"segment": "", "size": "", "characteristics": [""]}}],
  "user_acquisition_strategy": "",
  "user_retention_strategy": ""
}}

Business details:
{business_details}
"""


COMPETITION = """You are a competitive intelligence analyst. Map the competitive landscape
for the business below, naming real companies where possible.

""" + JSON_RULES + """

Required JSON structure:
{{
  "direct_competitors": [
    {{"name": "", "description": "", "strengths": [""], "weaknesses": [""], "market_share": ""}}
  ],
  "indirect_competitors": [
    {{"name": "", "description": "", "threat_level": "high" | "medium" | "low"}}
  ],
  "competitive_advantages": [""],
  "market_gaps": [""]
}}

Business details:
{business_details}
"""


UNIT_ECONOMICS = """You are a startup finance analyst. Estimate the unit economics of the
business below using industry benchmarks.

""" + JSON_RULES + """

Required JSON structure:
{{
  "pricing_model": "",
  "pricing_tiers": [{{"name": "", "price": "", "features": [""]}}],
  "metrics": {{
    "cac": "", "ltv": "", "margin": "", "payback_period": "", "break_even_point": ""
  }}
}}

Business details:
{business_details}
"""


FINANCIAL_PROJECTIONS = """You are a startup CFO. Build a conservative five-year financial
projection for the business below. Numbers are plain numbers in the stated currency.

""" + JSON_RULES + """

Required JSON structure:
{{
  "currency": "USD",
  "projections": [
    {{"year": 1, "revenue": 0, "costs": 0, "profit": 0, "customers": 0}}
  ],
  "assumptions": [""],
  "funding_required": "",
  "break_even_year": 3
}}

Business details:
{business_details}
"""


MARKETING_CHANNELS = """You are a growth marketer. Recommend marketing channels for the business below.

""" + JSON_RULES + """

Required JSON structure:
{{
  "channels": [
    {{"name": "", "type": "primary" | "secondary" | "experimental",
      "strategy": "", "budget": "", "kpis": [""]}}
  ],
  "total_budget": "",
  "recommendations": [""]
}}

Business details:
{business_details}
"""


GO_TO_MARKET_PLAN = """You are a go-to-market strategist. Lay out a phased launch plan for the
business below.

""" + JSON_RULES + """

Required JSON structure:
{{
  "launch_phases": [
    {{"phase": "", "timeline": "", "activities": [""], "metrics": [""]}}
  ],
  "key_partnerships": [{{"partner": "", "type": "", "value": ""}}],
  "resource_requirements": [""]
}}

Business details:
{business_details}
"""


VC_ACTIVITY = """You are a venture capital market analyst. Analyze the VC activity and
investment landscape for the startup idea below. Use realistic, current market data.

""" + JSON_RULES + """

Required JSON structure:
{{
  "active_vcs": 0,
  "total_investment": "Total VC investment in the space",
  "average_deal_size": "Average deal size",
  "notable_deals": [
    {{"investor": "", "company": "", "amount": "", "date": ""}}
  ]
}}

Business details:
{business_details}
"""


VC_SENTIMENT = """You are a venture partner. Assess how investors currently view ideas like the
one below.

""" + JSON_RULES + """

Required JSON structure:
{{
  "sentiment": {{
    "overall": "positive" | "neutral" | "negative",
    "confidence": 0.0-1.0,
    "key_factors": [""]
  }},
  "investment_trends": [""],
  "recommendations": [
    {{"category": "", "items": [""], "priority": "high" | "medium" | "low"}}
  ]
}}

Business details:
{business_details}
"""


CRITICAL_QUESTIONS = """You are a skeptical investor. List the critical questions the founders
must answer before this business is fundable, grouped by category.

""" + JSON_RULES + """

Required JSON structure:
{{
  "categories": [
    {{
      "category": "",
      "questions": [
        {{"question": "", "importance": "high" | "medium" | "low", "context": ""}}
      ]
    }}
  ]
}}

Business details:
{business_details}
"""
