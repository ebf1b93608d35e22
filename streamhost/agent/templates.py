"""Prompt templates. Placeholders use ``{{name}}`` and are filled by
:func:`streamhost.utils.helpers.render_template`."""

SELECT_COMMENT = """# Task: Select the most appropriate comment for {{agentName}} to respond to.
About {{agentName}}:
{{bio}}

# Selection Criteria:
- Prioritize direct mentions or questions to {{agentName}}
- Prefer topics that match {{agentName}}'s interests
- Prefer recent messages that have not been answered
- Ignore spam or irrelevant messages

{{recentMessages}}

# INSTRUCTIONS: Return only the ID of the single most appropriate comment to respond to. If no comments are suitable, return "NONE".
"""

MESSAGE_REPLY = """# Task: Write the next message for {{agentName}}, replying to a viewer comment during a live stream.
About {{agentName}}:
{{bio}}
{{lore}}

Examples of {{agentName}}'s messages:
{{messageExamples}}

# Recent stream activity
{{recentMessages}}

# Comment to answer
From: {{user}}
Message: {{comment}}

Also provide an animation for {{agentName}}. It must be one of:
{{animationOptions}}

# Style
- Keep messages short and sweet.
- Stay in character as {{agentName}}.

Response format should be formatted in a JSON block like this:
```json
{ "user": "{{agentName}}", "text": "your message", "action": "NONE", "animation": "one_of_available_animations" }
```
"""

REACTION_ANIMATION = """# Task: Choose an animation for {{agentName}} to play while saying the message below.

Message: {{lastMessage}}

The animation must be one of:
{{animationOptions}}

Respond with the animation name only. If nothing fits, respond with idle.
"""

GIFT_THANKS = """# Task: Write a personalized thank-you for a gift received during {{agentName}}'s stream.
About {{agentName}}:
{{bio}}
Personality: {{adjectives}}

# Gift Details
- Gift Type: {{giftName}}
- Quantity: {{giftCount}}
- Sender: {{handle}}
- Value: {{coinsTotal}} coins

# Requirements
- Acknowledge the gift and the sender in one concise sentence.
- Scale enthusiasm to the gift value (1-5 coins friendly, 6-20 enthusiastic, 21+ excited).
- Stay true to {{agentName}}'s personality.

# Animation
Choose ONE of: {{animationOptions}}

Format your response as a JSON object:
```json
{ "user": "{{agentName}}", "text": "your response message", "animation": "one_of_available_animations" }
```
"""

TOP_LIKER_THANKS = """# Task: Write a personalized thank you message for a top supporter.
About {{agentName}}:
{{bio}}

# Supporter Details
- Username: {{username}}
- Like Count: {{likeCount}}
- Rank: {{rank}}

# Requirements
1. Brief and genuine (1-2 sentences).
2. Acknowledge the number of likes.
3. Stay in character.

# Animation
Choose ONE of: {{animationOptions}}

Format your response as a JSON object:
```json
{ "text": "your response message", "animation": "one_of_available_animations" }
```
"""

FRESH_THOUGHT = """# Task: Generate a fresh thought for {{agentName}} to share on stream.

## Character Profile
- Name: {{agentName}}
- Personality Traits: {{adjectives}}
- Backstory & Lore: {{lore}}
- Bio: {{bio}}

## Recent Interactions
{{recentMessages}}

## Instructions
Share one short, in-character remark that fits the stream. Under 35 words.
Respond with the remark only.
"""

PERIODIC_ANIMATION = """# Task: Pick a fun, engaging animation for {{agentName}} during the stream.

Name: {{agentName}}
Personality: {{adjectives}}
Bio: {{bio}}

## Available Animations
{{animationOptions}}

Prefer subtle animations for regular moments. Return only one animation name from the list.
"""

PEER_CHAT_REPLY = """You are {{agentName}} in a group chat room with other hosts. Recent conversation:

{{chatHistory}}

The latest message was: {{latestMessage}}

A little about you:
{{bio}}
{{adjectives}}
{{lore}}

Reply naturally and keep it VERY SHORT, like a real conversation. If the chat is getting repetitive, change the topic.

Response format should be formatted in a JSON block like this:
```json
{ "user": "{{agentName}}", "text": "your message here" }
```
The response MUST be valid JSON.
"""
